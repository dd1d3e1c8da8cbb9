from app.models import LessonProgress, QuizSubmission, QuizSubmissionRejectionLog
from conftest import DEFAULT_PASSWORD, answer_key, auth_headers, complete_course, quiz_payload


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "healthy"
        assert "X-Request-ID" in response.headers


class TestAuth:
    def test_login_and_me(self, client, make_user):
        user = make_user("instructor", email="ivy@example.com")

        response = client.post(
            "/auth/login",
            json={"email": "ivy@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["role"] == "instructor"

        me = client.get(
            "/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["id"] == user.id

    def test_wrong_password(self, client, make_user):
        make_user(email="emma@example.com")

        response = client.post(
            "/auth/login", json={"email": "emma@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "error": "Invalid email or password",
            "type": "authentication_error",
        }

    def test_missing_token(self, client):
        assert client.get("/auth/me").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_inactive_user(self, client, make_user):
        user = make_user(is_active=False)
        assert client.get("/auth/me", headers=auth_headers(user)).status_code == 403


class TestQuizAuthoringApi:
    def test_instructor_saves_quiz(self, client, make_user, make_course):
        author = make_user("instructor")
        course = make_course(created_by=author.id)

        response = client.post(
            f"/courses/{course.id}/quiz", json=quiz_payload(), headers=auth_headers(author)
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_employee_cannot_author(self, client, make_user, make_course):
        learner = make_user()
        course = make_course()

        response = client.post(
            f"/courses/{course.id}/quiz", json=quiz_payload(), headers=auth_headers(learner)
        )

        assert response.status_code == 403
        assert response.json()["type"] == "authorization_error"

    def test_manager_cannot_author(self, client, make_user, make_course):
        manager = make_user("manager")
        course = make_course()

        response = client.post(
            f"/courses/{course.id}/quiz", json=quiz_payload(), headers=auth_headers(manager)
        )

        assert response.status_code == 403

    def test_missing_title_is_400(self, client, make_user, make_course):
        author = make_user("admin")
        course = make_course()
        payload = quiz_payload()
        payload.pop("title")

        response = client.post(
            f"/courses/{course.id}/quiz", json=payload, headers=auth_headers(author)
        )

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_learner_view_has_no_correct_flags(
        self, client, make_user, make_course, make_quiz
    ):
        author, learner = make_user("instructor"), make_user()
        course = make_course()
        make_quiz(course, author)

        learner_view = client.get(
            f"/courses/{course.id}/quiz", headers=auth_headers(learner)
        ).json()
        author_view = client.get(
            f"/courses/{course.id}/quiz", headers=auth_headers(author)
        ).json()

        learner_options = learner_view["quiz"]["questions"][0]["options"]
        author_options = author_view["quiz"]["questions"][0]["options"]
        assert all(o["is_correct"] is None for o in learner_options)
        assert [o["is_correct"] for o in author_options] == [False, True, False]

    def test_no_quiz(self, client, make_user, make_course):
        course = make_course()
        response = client.get(f"/courses/{course.id}/quiz", headers=auth_headers(make_user()))
        assert response.status_code == 200
        assert response.json()["quiz"] is None

    def test_delete_and_diagnostics(self, client, make_user, make_course, make_quiz):
        author = make_user("instructor")
        course = make_course()
        quiz = make_quiz(course, author)

        diagnostics = client.get(
            f"/quizzes/{quiz.id}/diagnostics", headers=auth_headers(author)
        )
        assert diagnostics.status_code == 200
        assert diagnostics.json()["has_issues"] is False

        response = client.delete(f"/quizzes/{quiz.id}", headers=auth_headers(author))
        assert response.status_code == 200
        assert client.delete(f"/quizzes/{quiz.id}", headers=auth_headers(author)).status_code == 200
        assert client.delete("/quizzes/9999", headers=auth_headers(author)).status_code == 404


class TestLearnerFlowApi:
    def test_full_flow(self, client, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        course = make_course(created_by=author.id, chapters=2)
        quiz = make_quiz(course, author)
        headers = auth_headers(learner)

        assert client.get(
            f"/courses/{course.id}/quiz/can-attempt", headers=headers
        ).json() == {"can_attempt": False}

        for module in course.modules:
            for chapter in module.chapters:
                response = client.post(
                    f"/courses/{course.id}/chapters/{chapter.id}/complete",
                    headers=headers,
                )
                assert response.status_code == 200

        progress = client.get(f"/courses/{course.id}/progress", headers=headers).json()
        assert progress["progress_percentage"] == 100
        assert client.get(
            f"/courses/{course.id}/quiz/can-attempt", headers=headers
        ).json() == {"can_attempt": True}

        submit = client.post(
            f"/quizzes/{quiz.id}/submit",
            json={"answers": answer_key(quiz, correct=1), "time_taken": 60},
            headers=headers,
        )
        assert submit.status_code == 200
        body = submit.json()
        assert (body["correct_answers"], body["total_questions"]) == (1, 2)
        assert body["score"] == 50
        assert body["passed"] is False

        check = client.get(f"/quizzes/{quiz.id}/check-attempt", headers=headers).json()
        assert check["can_attempt"] is False
        assert check["attempt_count"] == 1

        history = client.get(f"/courses/{course.id}/quiz/history", headers=headers).json()
        assert [h["id"] for h in history["history"]] == [body["submission_id"]]

        results = client.get(
            f"/courses/{course.id}/quiz/results/{body['submission_id']}", headers=headers
        )
        assert results.status_code == 200
        assert len(results.json()["answers"]) == 2

    def test_duplicate_submission_is_409(self, client, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        payload = {"answers": answer_key(quiz)}

        first = client.post(f"/quizzes/{quiz.id}/submit", json=payload, headers=auth_headers(learner))
        second = client.post(f"/quizzes/{quiz.id}/submit", json=payload, headers=auth_headers(learner))

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json() == {
            "error": "You have already attempted this quiz. Only one attempt is allowed.",
            "type": "duplicate_attempt",
        }

    def test_invalid_answer_is_400(self, client, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)

        response = client.post(
            f"/quizzes/{quiz.id}/submit",
            json={"answers": [{"question_id": quiz.questions[0].id, "selected_option_id": 99999}]},
            headers=auth_headers(learner),
        )

        assert response.status_code == 400
        assert response.json()["type"] == "invalid_answer"

    def test_missing_answers_field_is_422(self, client, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)

        response = client.post(
            f"/quizzes/{quiz.id}/submit", json={"time_taken": 5}, headers=auth_headers(learner)
        )

        assert response.status_code == 422

    def test_submit_to_missing_quiz_is_404(self, client, make_user):
        response = client.post(
            "/quizzes/4242/submit", json={"answers": []}, headers=auth_headers(make_user())
        )
        assert response.status_code == 404

    def test_other_learners_results_are_403(self, client, db, make_user, make_course, make_quiz):
        author, learner, stranger = make_user("instructor"), make_user(), make_user()
        course = make_course()
        quiz = make_quiz(course, author)
        submission_id = client.post(
            f"/quizzes/{quiz.id}/submit",
            json={"answers": answer_key(quiz)},
            headers=auth_headers(learner),
        ).json()["submission_id"]

        response = client.get(
            f"/courses/{course.id}/quiz/results/{submission_id}",
            headers=auth_headers(stranger),
        )

        assert response.status_code == 403


class TestStaffWorkflowApi:
    def _submit(self, client, quiz, learner):
        return client.post(
            f"/quizzes/{quiz.id}/submit",
            json={"answers": answer_key(quiz)},
            headers=auth_headers(learner),
        ).json()["submission_id"]

    def test_employee_cannot_review(self, client, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        submission_id = self._submit(client, quiz, learner)
        headers = auth_headers(learner)

        assert client.get(f"/submissions/{submission_id}", headers=headers).status_code == 403
        assert client.patch(f"/submissions/{submission_id}/approve", headers=headers).status_code == 403
        assert client.get("/submissions/all", headers=headers).status_code == 403

    def test_all_submissions_is_admin_only(self, client, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        self._submit(client, quiz, learner)

        assert client.get("/submissions/all", headers=auth_headers(author)).status_code == 403
        response = client.get("/submissions/all", headers=auth_headers(make_user("admin")))
        assert response.status_code == 200
        assert len(response.json()["submissions"]) == 1

    def test_approve(self, client, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        manager = make_user("manager")
        quiz = make_quiz(make_course(), author)
        submission_id = self._submit(client, quiz, learner)

        response = client.patch(
            f"/submissions/{submission_id}/approve", headers=auth_headers(manager)
        )

        assert response.status_code == 200
        details = client.get(
            f"/submissions/{submission_id}/full", headers=auth_headers(manager)
        ).json()
        assert details["submission"]["approval_status"] == "approved"
        assert details["submission"]["approved_by"] == manager.id

    def test_reject_requires_reason(self, client, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        submission_id = self._submit(client, quiz, learner)

        response = client.patch(
            f"/submissions/{submission_id}/reject",
            json={},
            headers=auth_headers(author),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Rejection reason is required"

    def test_reject(self, client, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        course = make_course(created_by=author.id, chapters=3)
        quiz = make_quiz(course, author)
        complete_course(db, course, learner)
        submission_id = self._submit(client, quiz, learner)

        response = client.patch(
            f"/submissions/{submission_id}/reject",
            json={"rejection_reason": "insufficient understanding"},
            headers=auth_headers(author),
        )

        assert response.status_code == 200
        assert db.query(QuizSubmission).count() == 0
        assert db.query(QuizSubmissionRejectionLog).count() == 1
        assert db.query(LessonProgress).filter_by(user_id=learner.id).count() == 0
        assert client.get(
            f"/quizzes/{quiz.id}/check-attempt", headers=auth_headers(learner)
        ).json()["can_attempt"] is True

    def test_reset_attempts(self, client, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        course = make_course(chapters=2)
        quiz = make_quiz(course, author)
        complete_course(db, course, learner)
        submission_id = self._submit(client, quiz, learner)

        response = client.patch(
            f"/submissions/{submission_id}/reset-attempts", headers=auth_headers(author)
        )

        assert response.status_code == 200
        assert db.query(QuizSubmission).count() == 0
        assert db.query(LessonProgress).filter_by(user_id=learner.id).count() == 2

    def test_unknown_submission_is_404(self, client, make_user):
        headers = auth_headers(make_user("admin"))

        assert client.get("/submissions/555", headers=headers).status_code == 404
        assert client.patch("/submissions/555/approve", headers=headers).status_code == 404
        assert client.patch("/submissions/555/reset-attempts", headers=headers).status_code == 404

    def test_course_submissions_owner_check(self, client, make_user, make_course, make_quiz):
        owner, other = make_user("instructor"), make_user("instructor")
        learner = make_user()
        course = make_course(created_by=owner.id)
        quiz = make_quiz(course, owner)
        self._submit(client, quiz, learner)

        url = f"/courses/{course.id}/quiz/submissions"
        assert client.get(url, headers=auth_headers(owner)).status_code == 200
        assert client.get(url, headers=auth_headers(other)).status_code == 403
        assert client.get(url, headers=auth_headers(learner)).status_code == 403
