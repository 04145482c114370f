import pytest

from helpers import seed_learner, seed_quiz, seed_school


@pytest.fixture
async def quiz_setup(session_factory):
    async with session_factory() as session:
        _, classroom, pin = await seed_school(session)
        learner = await seed_learner(session, class_id=classroom.id, pin_id=pin.id)
        quiz = await seed_quiz(session, classroom.id)
        await session.commit()
        return quiz.id, learner.identifiant


async def create_question(client, quiz_id, **fields):
    payload = {"quiz_id": quiz_id, "question_text": "Question ?", **fields}
    response = await client.post("/questions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def quiz_questions(client, quiz_id):
    response = await client.get(f"/quiz/{quiz_id}/questions")
    assert response.status_code == 200
    return {q["id"]: q for q in response.json()}


async def test_choice_question_round_trip_through_scoring(client, quiz_setup):
    quiz_id, identifiant = quiz_setup
    question_id = await create_question(
        client, quiz_id,
        type="choice",
        options=["Antsirabe", "Antananarivo", "Mahajanga", "Toliara"],
        correct_choice=2
    )

    question = (await quiz_questions(client, quiz_id))[question_id]
    assert [o["option_text"] for o in question["options"]] == [
        "Antsirabe", "Antananarivo", "Mahajanga", "Toliara"
    ]
    assert [o["is_correct"] for o in question["options"]] == [False, True, False, False]

    result = await client.post("/api/submit", json={
        "quiz_id": quiz_id,
        "identifiant": identifiant,
        "answers": [{"question_id": question_id, "choice_index": 2}],
    })
    assert result.json()["score"] == 1


async def test_true_false_gets_fixed_options(client, quiz_setup):
    quiz_id, _ = quiz_setup
    question_id = await create_question(
        client, quiz_id, type="true_false", options=["ignored"], correct_choice=2
    )

    options = (await quiz_questions(client, quiz_id))[question_id]["options"]

    assert [(o["choice_index"], o["option_text"], o["is_correct"]) for o in options] == [
        (1, "True", False),
        (2, "False", True),
    ]


async def test_ordering_question_scores_the_ranked_permutation(client, quiz_setup):
    quiz_id, identifiant = quiz_setup
    question_id = await create_question(
        client, quiz_id,
        type="ordering",
        options=["Semer", "Récolter", "Labourer", "Repiquer"],
        correct_order=[2, 4, 1, 3]
    )

    right = await client.post("/api/submit", json={
        "quiz_id": quiz_id,
        "identifiant": identifiant,
        "answers": [{"question_id": question_id, "puzzle_order": [3, 1, 4, 2]}],
    })
    wrong = await client.post("/api/submit", json={
        "quiz_id": quiz_id,
        "identifiant": identifiant,
        "answers": [{"question_id": question_id, "puzzle_order": [1, 2, 3, 4]}],
    })

    assert right.json()["score"] == 1
    assert wrong.json()["score"] == 0


async def test_ordering_requires_distinct_ranks(client, quiz_setup):
    quiz_id, _ = quiz_setup
    response = await client.post("/questions", json={
        "quiz_id": quiz_id,
        "question_text": "Ordre ?",
        "type": "ordering",
        "options": ["a", "b", "c", "d"],
        "correct_order": [1, 1, 2, 3],
    })

    assert response.status_code == 400


async def test_choice_requires_four_options(client, quiz_setup):
    quiz_id, _ = quiz_setup
    response = await client.post("/questions", json={
        "quiz_id": quiz_id,
        "question_text": "Capitale ?",
        "type": "choice",
        "options": ["a", "b", ""],
        "correct_choice": 1,
    })

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "options"


async def test_free_text_question(client, quiz_setup):
    quiz_id, identifiant = quiz_setup
    question_id = await create_question(
        client, quiz_id, type="free_text", canonical_answer="Madagascar"
    )

    question = (await quiz_questions(client, quiz_id))[question_id]
    result = await client.post("/api/submit", json={
        "quiz_id": quiz_id,
        "identifiant": identifiant,
        "answers": [{"question_id": question_id, "text_answer": "MADAGASCAR "}],
    })

    assert question["options"] == []
    assert question["canonical_answer"] == "Madagascar"
    assert result.json()["score"] == 1


async def test_create_for_unknown_quiz(client):
    response = await client.post("/questions", json={
        "quiz_id": 999, "question_text": "?", "type": "free_text", "canonical_answer": "x"
    })

    assert response.status_code == 404


async def test_update_keeps_texts_and_moves_correct_choice(client, quiz_setup):
    quiz_id, _ = quiz_setup
    question_id = await create_question(
        client, quiz_id, type="choice", options=["a", "b", "c", "d"], correct_choice=1
    )

    updated = await client.put(f"/questions/{question_id}", json={
        "question_text": "Nouvelle question ?",
        "type": "choice",
        "correct_choice": 4,
    })

    assert updated.status_code == 200
    question = (await quiz_questions(client, quiz_id))[question_id]
    assert question["question_text"] == "Nouvelle question ?"
    assert [o["option_text"] for o in question["options"]] == ["a", "b", "c", "d"]
    assert [o["is_correct"] for o in question["options"]] == [False, False, False, True]


async def test_update_to_free_text_drops_options(client, quiz_setup):
    quiz_id, _ = quiz_setup
    question_id = await create_question(
        client, quiz_id, type="choice", options=["a", "b", "c", "d"], correct_choice=1
    )

    await client.put(f"/questions/{question_id}", json={
        "question_text": "Capitale ?",
        "type": "free_text",
        "canonical_answer": "Antananarivo",
    })

    question = (await quiz_questions(client, quiz_id))[question_id]
    assert question["type"] == "free_text"
    assert question["options"] == []


async def test_update_and_delete_unknown_question(client):
    update = await client.put("/questions/999", json={"question_text": "?", "type": "choice"})
    delete = await client.delete("/questions/999")

    assert update.status_code == 404
    assert delete.status_code == 404


async def test_delete_question(client, quiz_setup):
    quiz_id, _ = quiz_setup
    question_id = await create_question(
        client, quiz_id, type="choice", options=["a", "b", "c", "d"], correct_choice=1
    )

    response = await client.delete(f"/questions/{question_id}")

    assert response.status_code == 200
    assert question_id not in await quiz_questions(client, quiz_id)
