import pytest

from quizdesk.models import ClassRoom

from helpers import seed_question, seed_quiz, seed_school


@pytest.fixture
async def class_id(session_factory):
    async with session_factory() as session:
        _, classroom, _ = await seed_school(session)
        await session.commit()
        return classroom.id


async def test_create_and_list_quizzes(client, class_id):
    created = await client.post("/quiz", json={"title": "  Géographie ", "class_id": class_id})
    await client.post("/quiz", json={"title": "Histoire", "class_id": class_id, "type": "ordering"})

    assert created.status_code == 201
    assert created.json()["message"] == "Quiz created"

    listing = (await client.get("/quiz")).json()
    assert [q["title"] for q in listing] == ["Histoire", "Géographie"]
    assert all(q["is_active"] for q in listing)


async def test_list_filters(client, session_factory, class_id):
    async with session_factory() as session:
        other_class = ClassRoom(name="Seconde B")
        session.add(other_class)
        await session.commit()
        other_class_id = other_class.id

    first = (await client.post("/quiz", json={"title": "Maths", "class_id": class_id})).json()["id"]
    await client.post("/quiz", json={"title": "Physique", "class_id": other_class_id})
    await client.put(f"/quiz/{first}", json={"title": "Maths", "is_active": False})

    by_class = (await client.get("/quiz", params={"class_id": class_id})).json()
    closed = (await client.get("/quiz", params={"is_active": "false"})).json()

    assert [q["title"] for q in by_class] == ["Maths"]
    assert [q["id"] for q in closed] == [first]


async def test_update_without_is_active_reopens(client, class_id):
    quiz_id = (await client.post("/quiz", json={"title": "Maths", "class_id": class_id})).json()["id"]

    await client.put(f"/quiz/{quiz_id}", json={"title": "Maths", "is_active": False})
    reopened = await client.put(f"/quiz/{quiz_id}", json={"title": "Maths avancées"})

    assert reopened.status_code == 200
    quiz = (await client.get("/quiz")).json()[0]
    assert quiz["title"] == "Maths avancées"
    assert quiz["is_active"] is True


async def test_update_unknown_quiz(client):
    response = await client.put("/quiz/404", json={"title": "Nope"})

    assert response.status_code == 404


async def test_create_requires_title(client, class_id):
    response = await client.post("/quiz", json={"title": "   ", "class_id": class_id})

    assert response.status_code == 400


async def test_delete_quiz_removes_questions(client, session_factory, class_id):
    async with session_factory() as session:
        quiz = await seed_quiz(session, class_id)
        await seed_question(session, quiz.id, "choice", [(1, "A", True, None), (2, "B", False, None)])
        await session.commit()
        quiz_id = quiz.id

    deleted = await client.delete(f"/quiz/{quiz_id}")
    questions = await client.get(f"/quiz/{quiz_id}/questions")
    again = await client.delete(f"/quiz/{quiz_id}")

    assert deleted.status_code == 200
    assert questions.json() == []
    assert again.status_code == 404
