import re

import pytest

from quizdesk.services.result_ledger import ResultLedger

from helpers import count_scores, seed_learner, seed_quiz, seed_school


@pytest.fixture
async def school(session_factory):
    async with session_factory() as session:
        establishment, classroom, pin = await seed_school(session)
        await session.commit()
        return {"establishment_id": establishment.id, "class_id": classroom.id, "pin_id": pin.id}


async def register(client, school, name="Rasoa", pin_code="1234"):
    return await client.post("/users/register", json={
        "name": name,
        "establishment_id": school["establishment_id"],
        "class_id": school["class_id"],
        "pin_code": pin_code,
    })


async def test_register_and_login(client, school):
    registered = await register(client, school)

    assert registered.status_code == 201
    identifiant = registered.json()["identifiant"]
    assert re.fullmatch(r"U\d{6}", identifiant)

    login = await client.post("/users/login", json={"identifiant": identifiant, "pin_code": "1234"})

    assert login.status_code == 200
    profile = login.json()
    assert profile["name"] == "Rasoa"
    assert profile["establishment"] == "LYCEE ANDOHALO"
    assert profile["class_name"] == "Terminale A"
    assert profile["is_active"] is True


async def test_identifiants_are_unique(client, school):
    first = (await register(client, school, name="Rasoa")).json()["identifiant"]
    second = (await register(client, school, name="Rabe")).json()["identifiant"]

    assert first != second


async def test_register_with_unknown_pin(client, school):
    response = await register(client, school, pin_code="0000")

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "pin_code"


async def test_register_with_deactivated_pin(client, school):
    await client.put(f"/admin/pins/{school['pin_id']}/status", json={"is_active": False})

    response = await register(client, school)

    assert response.status_code == 400


async def test_register_with_unknown_establishment(client, school):
    response = await client.post("/users/register", json={
        "name": "Rasoa", "establishment_id": 999, "class_id": school["class_id"], "pin_code": "1234"
    })

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "establishment_id"


async def test_login_rejected_after_pin_deactivation(client, school):
    identifiant = (await register(client, school)).json()["identifiant"]
    await client.put(f"/admin/pins/{school['pin_id']}/status", json={"is_active": False})

    response = await client.post("/users/login", json={"identifiant": identifiant, "pin_code": "1234"})

    assert response.status_code == 400


async def test_login_with_wrong_pin(client, school):
    identifiant = (await register(client, school)).json()["identifiant"]

    response = await client.post("/users/login", json={"identifiant": identifiant, "pin_code": "9999"})

    assert response.status_code == 400


async def test_list_and_delete_learner(client, school):
    await register(client, school, name="Rasoa")
    await register(client, school, name="Rabe")

    learners = (await client.get("/users")).json()
    assert [l["name"] for l in learners] == ["Rabe", "Rasoa"]
    assert learners[0]["pin_code"] == "1234"

    deleted = await client.delete(f"/users/{learners[0]['id']}")
    again = await client.delete(f"/users/{learners[0]['id']}")

    assert deleted.status_code == 200
    assert again.status_code == 404
    assert [l["name"] for l in (await client.get("/users")).json()] == ["Rasoa"]


async def test_learner_with_results_cannot_be_deleted(client, session_factory, school):
    async with session_factory() as session:
        learner = await seed_learner(
            session, class_id=school["class_id"], pin_id=school["pin_id"]
        )
        quiz = await seed_quiz(session, school["class_id"])
        await ResultLedger().append(session, quiz.id, learner.id, score=1, max_score=1, time_taken=8)
        await session.commit()
        learner_id = learner.id

    response = await client.delete(f"/users/{learner_id}")

    assert response.status_code == 409
    assert [l["id"] for l in (await client.get("/users")).json()] == [learner_id]
    async with session_factory() as session:
        assert await count_scores(session) == 1
