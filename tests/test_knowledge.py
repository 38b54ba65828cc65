from types import SimpleNamespace

import pytest

from app.consultant.knowledge import (
    CourseCatalog,
    CourseRequestFacts,
    DialogExampleStore,
    OpenAIEmbedder,
    TopicSectionStore,
    mentions_courses,
)
from app.consultant.knowledge.embeddings import cosine_similarity
from app.consultant.knowledge.text import stem, stems
from app.consultant.schemas import INFO_TOPICS

from conftest import DATA_DIR, DIALOG, FakeEmbedder


def test_dialog_parse_keeps_multiline_answers() -> None:
    examples = DialogExampleStore.parse(
        "Вопрос: Как проходит аттестация?\n"
        "Ответ: Дистанционно.\n"
        "Попыток сколько угодно.\n"
        "\n"
        "Вопрос: Есть лицензия?\n"
        "Ответ: Да.\n"
    )
    assert [e.question for e in examples] == ["Как проходит аттестация?", "Есть лицензия?"]
    assert examples[0].answer == "Дистанционно.\nПопыток сколько угодно."


@pytest.mark.asyncio
async def test_dialog_search_ranks_closest_question_first() -> None:
    store = DialogExampleStore(DialogExampleStore.parse(DIALOG))
    results = await store.search("как оплатить обучение картой")
    assert results[0].question == "Как оплатить обучение?"


@pytest.mark.asyncio
async def test_dialog_search_ignores_weak_matches() -> None:
    store = DialogExampleStore(DialogExampleStore.parse(DIALOG))
    assert await store.search("Где находится ваш офис?") == []


@pytest.mark.asyncio
async def test_semantic_search_matches_paraphrase() -> None:
    examples = DialogExampleStore.parse(DIALOG)
    semantic = DialogExampleStore(examples, embedder=FakeEmbedder())

    results = await semantic.search("Можно ли заплатить картой?")

    assert semantic.semantic
    assert [e.question for e in results] == ["Как оплатить обучение?"]
    assert await DialogExampleStore(examples).search("Можно ли заплатить картой?") == []


@pytest.mark.asyncio
async def test_semantic_search_ignores_unrelated_question() -> None:
    store = DialogExampleStore(DialogExampleStore.parse(DIALOG), embedder=FakeEmbedder())
    assert await store.search("Где находится ваш офис?") == []


@pytest.mark.asyncio
async def test_example_questions_embedded_once() -> None:
    embedder = FakeEmbedder()
    store = DialogExampleStore(DialogExampleStore.parse(DIALOG), embedder=embedder)

    await store.search("Как сдать экзамен?")
    await store.search("Как заплатить?")

    assert embedder.calls == [
        ["Как оплатить обучение?", "Как проходит итоговая аттестация?"],
        ["Как сдать экзамен?"],
        ["Как заплатить?"],
    ]


@pytest.mark.asyncio
async def test_openai_embedder_sends_batch_to_model() -> None:
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2]) for _ in kwargs["input"]])

    client = SimpleNamespace(embeddings=SimpleNamespace(create=create))

    vectors = await OpenAIEmbedder(client, "text-embedding-3-small")(["a", "b"])

    assert vectors == [[0.1, 0.2], [0.1, 0.2]]
    assert calls == [{"input": ["a", "b"], "model": "text-embedding-3-small"}]


def test_cosine_similarity() -> None:
    assert cosine_similarity([1.0, 0.0], [2.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0
    with pytest.raises(ValueError):
        cosine_similarity([1.0], [1.0, 2.0])


def test_topic_sections_parse_by_title() -> None:
    store = TopicSectionStore(TopicSectionStore.parse("[payment]\nКартой.\n\n[attestation]\nТест.\n"))
    assert store.get("payment") == "Картой."
    assert store.get("attestation") == "Тест."
    assert store.get("registration") is None


def test_sample_data_files_load() -> None:
    dialog = DialogExampleStore.from_file(DATA_DIR / "dialog_pedrabotnik.txt")
    sections = TopicSectionStore.from_file(DATA_DIR / "main_information.txt")
    assert len(dialog) > 0
    assert set(sections.keys()) == set(INFO_TOPICS)


def test_stems_match_across_word_forms() -> None:
    assert stem("школа") == stem("школе")
    assert stem("учитель") == stem("учителя")
    assert "как" not in stems("Как дела")


def test_facts_from_texts() -> None:
    facts = CourseRequestFacts.from_texts(["Нужна переподготовка", "Работаю воспитателем в детском саду"])
    assert facts.track == "retraining"
    assert facts.institution == "preschool"
    assert facts.focus == frozenset({"воспит"})
    assert facts.missing == []


def test_generic_role_is_not_a_focus() -> None:
    facts = CourseRequestFacts.from_texts(["Переподготовка, я учитель в школе"])
    assert facts.missing == ["focus"]


def test_driving_school_is_not_a_school() -> None:
    facts = CourseRequestFacts.from_texts(["Я инструктор в автошколе"])
    assert facts.institution == "driving_school"


def test_missing_facts_in_priority_order() -> None:
    assert CourseRequestFacts().missing == ["track", "institution", "focus"]


def test_mentions_courses() -> None:
    assert mentions_courses(["Подберите программу"])
    assert not mentions_courses(["Здравствуйте"])


def test_catalog_treats_trud_and_technology_as_one_subject() -> None:
    catalog = CourseCatalog.from_files(DATA_DIR / "retraining.json", DATA_DIR / "upskilling.json")
    facts = CourseRequestFacts.from_texts(["Переподготовка, учитель труда в школе"])

    results = catalog.search(facts)

    assert results
    assert results[0].course_name.startswith("Учитель технологии")


def test_catalog_prefers_matching_institution_and_limits_results() -> None:
    catalog = CourseCatalog.from_files(DATA_DIR / "retraining.json", DATA_DIR / "upskilling.json")
    facts = CourseRequestFacts(track="upskilling", institution="preschool", focus=frozenset({"воспит"}))

    results = catalog.search(facts)

    assert 0 < len(results) <= 3
    assert results[0].course_name.startswith("Организация образовательной деятельности в ДОУ")
    assert all("preschool" in r.education_level or not r.education_level for r in results)


def test_course_record_has_four_fields() -> None:
    catalog = CourseCatalog.from_files(DATA_DIR / "retraining.json", DATA_DIR / "upskilling.json")
    record = catalog.search(CourseRequestFacts.from_texts(["Переподготовка, учитель математики в школе"]))[0]
    lines = record.format_record().splitlines()
    assert [line[:2] for line in lines] == ["1)", "2)", "3)", "4)"]
    assert lines[3].endswith("https://педработник.рф/courses/uchitel-matematiki")


def test_filler_word_is_not_a_focus() -> None:
    catalog = CourseCatalog.from_files(DATA_DIR / "retraining.json", DATA_DIR / "upskilling.json")
    facts = CourseRequestFacts.from_texts(
        ["Посоветуйте переподготовку, я учитель в школе"], catalog.vocabulary
    )
    assert facts.focus == frozenset()
    assert facts.missing == ["focus"]


def test_catalog_vocabulary_keeps_subjects_and_drops_title_filler() -> None:
    catalog = CourseCatalog.from_files(DATA_DIR / "retraining.json", DATA_DIR / "upskilling.json")
    assert stem("математики") in catalog.vocabulary
    assert stem("химии") in catalog.vocabulary
    assert stem("организации") not in catalog.vocabulary
    assert stem("учитель") not in catalog.vocabulary
