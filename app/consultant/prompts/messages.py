"""Fixed reply texts used verbatim by the handlers."""

CLOSING_LINE = "Подскажите, это помогло?"

ESCALATION_MESSAGE = (
    "Благодарю за Ваше обращение! К сожалению, на данный вопрос я не могу "
    "предоставить полный ответ, так как он требует участия наших сотрудников. \n"
    "Вы можете:\n"
    "- Позвонить нам в рабочее время с 9:00 до 18:00 (МСК) по бесплатному номеру +78002501015\n"
    "- Связаться напрямую с вашим персональным менеджером:\n"
    "\n"
    "Карина: +79515357410\n"
    "Ирина: +79185742875\n"
    "\n"
    "Наши специалисты будут рады помочь вам и ответить на все вопросы. Спасибо за понимание!"
)

DOCUMENTS_SUBMISSION_TEXT = (
    "Добрый день! Для отправки документов вы можете воспользоваться следующими способами:\n"
    "\n"
    "1. Загрузить документы в вашем личном кабинете на сайте Педработник.РФ, "
    "используя кнопку «Загрузка файлов».\n"
    "2. Отправить документы на электронную почту: 89081725519@mail.ru или 89185742875@mail.ru .\n"
    "Если у вас возникнут дополнительные вопросы, пожалуйста, дайте знать!"
)

CONTRACT_NUMBER_REQUEST = "Подскажите, пожалуйста, номер вашего договора."

LEARNING_MATERIALS_TEXT = (
    "После оплаты учебные материалы будут доступны в вашем личном кабинете на сайте "
    "педработник.рф. Войдите в личный кабинет, нажмите «Учебные материалы и тесты», затем "
    "нажмите на активную синюю строку под стрелкой «Учебные материалы». Это ваше учебное "
    "пособие: вы изучаете его самостоятельно и используете для итогового тестирования "
    "в назначенный день."
)

PROGRAM_NOT_FOUND = "К сожалению, этой программы нет на сайте."

# One question per missing course-selection fact, most critical first.
TRACK_QUESTION = "Вас интересует профессиональная переподготовка или повышение квалификации?"
INSTITUTION_QUESTION = (
    "Подскажите, где вы работаете: ДОУ, школа, колледж, дополнительное образование или автошкола?"
)
FOCUS_QUESTION = "Какое направление, должность или предмет вам нужен?"

# Transport-level replies.
BLOCKED_REPLY = "Извините, я не могу ответить на это сообщение."
EMPTY_REPLY = "Извините, не удалось сформировать ответ."
ERROR_REPLY = "Произошла ошибка. Попробуйте еще раз."


def with_closing_line(text: str) -> str:
    """Append the confirmation line unless the text ends with it or escalates."""
    stripped = text.rstrip()
    if stripped.endswith(CLOSING_LINE) or is_escalation(stripped):
        return stripped
    return f"{stripped}\n\n{CLOSING_LINE}"


def is_escalation(text: str) -> bool:
    """True when `text` carries the escalation message, whitespace aside."""
    return " ".join(ESCALATION_MESSAGE.split()) in " ".join(text.split())


# Appended to every persona holding the invite_agent tool.
ESCALATION_RULE = f"""Передача консультанту:
Если вопрос нельзя решить по полученным данным (нужны действия сотрудников, изменение
персональных данных, жалоба, возврат денег, данных нет или их недостаточно), вызови
инструмент invite_agent и ответь строго этим текстом без изменений и без заключительного вопроса:

{ESCALATION_MESSAGE}"""
