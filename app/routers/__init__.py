from .auth import router as auth_router
from .progress import router as progress_router
from .quiz import router as quiz_router
from .submission import router as submission_router

routes = [
    auth_router,
    quiz_router,
    submission_router,
    progress_router,
]
