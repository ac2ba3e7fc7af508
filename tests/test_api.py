from factories import quiz_payload


def create_via_api(client, headers, **overrides):
    response = client.post("/api/v1/quizzes", json=quiz_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def correct_answer_for(quiz_json):
    question = quiz_json["questions"][0]
    option = next(option for option in question["options"] if option["isCorrect"])
    return {"questionId": question["id"], "selectedOption": option["id"]}


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Assessment API"}


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/v1/quizzes").status_code == 401
    assert client.post("/api/v1/quizzes", json=quiz_payload()).status_code == 401
    assert client.get("/api/v1/progress/quizzes/me").status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/quizzes", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_teacher_creates_quiz(client, teacher_headers, lesson):
    body = create_via_api(client, teacher_headers, lessonId=lesson.id, totalPoints=50)

    assert body["totalPoints"] == 1
    assert body["createdBy"] == "teacher-1"
    assert body["lessonId"] == lesson.id
    assert body["class"] == 10
    assert body["type"] == "assessment"
    assert body["isDeleted"] is False
    assert body["questions"][0]["options"][1]["isCorrect"] is True


def test_student_cannot_create_quiz(client, student_headers):
    response = client.post("/api/v1/quizzes", json=quiz_payload(), headers=student_headers)

    assert response.status_code == 403


def test_create_quiz_validation(client, teacher_headers):
    no_questions = client.post("/api/v1/quizzes", json=quiz_payload(questions=[]), headers=teacher_headers)
    no_english = client.post("/api/v1/quizzes", json=quiz_payload(title={"hi": "परीक्षा"}), headers=teacher_headers)
    bad_class = client.post("/api/v1/quizzes", json=quiz_payload(**{"class": 13}), headers=teacher_headers)

    assert no_questions.status_code == 422
    assert no_english.status_code == 422
    assert bad_class.status_code == 422


def test_get_quiz_is_projected_by_role(client, teacher_headers, student_headers):
    created = create_via_api(client, teacher_headers)

    full = client.get(f"/api/v1/quizzes/{created['id']}", headers=teacher_headers).json()
    redacted = client.get(f"/api/v1/quizzes/{created['id']}", headers=student_headers).json()

    assert full["questions"][0]["explanation"]["en"] == "Two plus two is four."
    assert "isCorrect" in full["questions"][0]["options"][0]

    question = redacted["questions"][0]
    assert "explanation" not in question
    assert "correctAnswer" not in question
    assert all("isCorrect" not in option for option in question["options"])
    assert [o["id"] for o in question["options"]] == [o["id"] for o in full["questions"][0]["options"]]


def test_get_missing_quiz_returns_404(client, student_headers):
    response = client.get("/api/v1/quizzes/missing-quiz", headers=student_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Quiz not found"


def test_list_quizzes_with_filters(client, teacher_headers, student_headers):
    create_via_api(client, teacher_headers)
    create_via_api(client, teacher_headers, subject="Science", **{"class": 7})

    everything = client.get("/api/v1/quizzes", headers=student_headers)
    science = client.get("/api/v1/quizzes", params={"subject": "Science"}, headers=student_headers)
    class_seven = client.get("/api/v1/quizzes", params={"class": 7}, headers=teacher_headers)

    assert everything.status_code == 200
    assert len(everything.json()) == 2
    assert all("isCorrect" not in o for q in everything.json() for o in q["questions"][0]["options"])
    assert [q["subject"] for q in science.json()] == ["Science"]
    assert [q["class"] for q in class_seven.json()] == [7]


def test_update_quiz(client, teacher_headers, student_headers):
    created = create_via_api(client, teacher_headers, isPublished=False)

    forbidden = client.patch(f"/api/v1/quizzes/{created['id']}", json={"passingScore": 90}, headers=student_headers)
    response = client.patch(
        f"/api/v1/quizzes/{created['id']}",
        json={"passingScore": 90, "isPublished": True},
        headers=teacher_headers,
    )

    assert forbidden.status_code == 403
    assert response.status_code == 200
    body = response.json()
    assert body["passingScore"] == 90
    assert body["isPublished"] is True
    assert body["publishedAt"] is not None
    assert body["title"]["en"] == "Test Quiz"


def test_delete_quiz(client, teacher_headers, student_headers):
    created = create_via_api(client, teacher_headers)

    assert client.delete(f"/api/v1/quizzes/{created['id']}", headers=student_headers).status_code == 403

    response = client.delete(f"/api/v1/quizzes/{created['id']}", headers=teacher_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Quiz deleted successfully"}

    assert client.get(f"/api/v1/quizzes/{created['id']}", headers=teacher_headers).status_code == 404
    assert client.delete(f"/api/v1/quizzes/{created['id']}", headers=teacher_headers).status_code == 404
    assert client.get("/api/v1/quizzes", headers=teacher_headers).json() == []


def test_submit_attempt_and_history(client, teacher_headers, student_headers, lesson):
    created = create_via_api(client, teacher_headers, lessonId=lesson.id)
    url = f"/api/v1/quizzes/{created['id']}/attempt"

    first = client.post(url, json={"answers": [correct_answer_for(created)]}, headers=student_headers)
    second = client.post(
        url,
        json={
            "answers": [{"questionId": created["questions"][0]["id"], "answer": "four"}],
            "startedAt": "2024-01-01T10:00:00Z",
            "clientTimestamp": "2024-01-01T10:02:00Z",
        },
        headers=student_headers,
    )

    assert first.status_code == 201
    body = first.json()
    assert body["attemptNumber"] == 1
    assert body["score"] == 1
    assert body["totalPoints"] == 1
    assert body["percentage"] == 100
    assert body["passed"] is True
    assert body["userId"] == "student-1"
    assert body["results"][0]["isCorrect"] is True

    assert second.status_code == 201
    assert second.json()["attemptNumber"] == 2
    assert second.json()["passed"] is False
    assert second.json()["duration"] == 120

    history = client.get("/api/v1/progress/quizzes/me", headers=student_headers)
    assert history.status_code == 200
    items = history.json()
    assert [item["attemptNumber"] for item in items] == [1, 2]
    assert items[0]["lesson"]["title"] == "Test Lesson"
    assert items[0]["status"] == "in_progress"
    assert items[0]["answers"][0]["isCorrect"] is True

    assert client.get("/api/v1/progress/quizzes/me", headers=teacher_headers).json() == []


def test_submit_attempt_validation_and_not_found(client, teacher_headers, student_headers):
    created = create_via_api(client, teacher_headers)

    empty = client.post(f"/api/v1/quizzes/{created['id']}/attempt", json={"answers": []}, headers=student_headers)
    missing = client.post(
        "/api/v1/quizzes/missing-quiz/attempt",
        json={"answers": [{"questionId": "q", "answer": "x"}]},
        headers=student_headers,
    )

    assert empty.status_code == 422
    assert missing.status_code == 404


def test_submit_to_lessonless_quiz_has_no_attempt_number(client, teacher_headers, student_headers):
    created = create_via_api(client, teacher_headers)

    response = client.post(
        f"/api/v1/quizzes/{created['id']}/attempt",
        json={"answers": [correct_answer_for(created)]},
        headers=student_headers,
    )

    assert response.status_code == 201
    assert response.json()["attemptNumber"] is None
    assert client.get("/api/v1/progress/quizzes/me", headers=student_headers).json() == []


def test_analytics_endpoint(client, teacher_headers, student_headers, lesson):
    created = create_via_api(client, teacher_headers, lessonId=lesson.id)
    client.post(
        f"/api/v1/quizzes/{created['id']}/attempt",
        json={"answers": [correct_answer_for(created)]},
        headers=student_headers,
    )

    forbidden = client.get(f"/api/v1/quizzes/{created['id']}/analytics", headers=student_headers)
    response = client.get(f"/api/v1/quizzes/{created['id']}/analytics", headers=teacher_headers)
    missing = client.get("/api/v1/quizzes/missing-quiz/analytics", headers=teacher_headers)

    assert forbidden.status_code == 403
    assert missing.status_code == 404
    assert response.status_code == 200
    body = response.json()
    assert body["totalAttempts"] == 1
    assert body["uniqueStudents"] == 1
    assert body["passRate"] == 100
    assert body["questionStats"][0]["correctCount"] == 1


def test_quiz_with_unknown_lesson_is_rejected(client, teacher_headers):
    response = client.post(
        "/api/v1/quizzes", json=quiz_payload(lessonId="no-such-lesson"), headers=teacher_headers
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Lesson not found"
    assert client.get("/api/v1/quizzes", headers=teacher_headers).json() == []

    created = create_via_api(client, teacher_headers)
    patched = client.patch(
        f"/api/v1/quizzes/{created['id']}", json={"lessonId": "no-such-lesson"}, headers=teacher_headers
    )

    assert patched.status_code == 404
    assert patched.json()["detail"] == "Lesson not found"
