"""Telegram transport: long polling, text messages only.

Run with ``python -m app.telegram_bot``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from .config import Settings, get_settings
from .consultant.service import ConsultantService
from .conversation import answer_message, create_session_store
from .infrastructure import SessionStore, configure_tracing

logger = logging.getLogger(__name__)

GREETING = "Здравствуйте! Я консультант Педработник.РФ. Задайте ваш вопрос."
TYPING_INTERVAL_SECONDS = 4


class ConsultantBot:
    """Routes Telegram text messages to the consultant, one at a time per chat."""

    def __init__(
        self,
        settings: Settings,
        consultant: ConsultantService,
        store: SessionStore,
    ) -> None:
        self._settings = settings
        self._consultant = consultant
        self._store = store
        # chat_id -> lock and the number of handlers holding or awaiting it
        self._chat_locks: dict[str, tuple[asyncio.Lock, int]] = {}

    def register(self, application: Application) -> None:
        application.add_handler(CommandHandler("start", self._on_start))
        application.add_handler(CommandHandler("reset", self._on_reset))
        application.add_handler(
            MessageHandler(filters.TEXT & ~filters.COMMAND, self._on_text, block=False)
        )

    async def _on_start(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.message is None:
            return
        await update.message.reply_text(GREETING)

    async def _on_reset(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.message is None:
            return
        await self._store.clear(str(update.message.chat_id))
        await update.message.reply_text("История диалога очищена.")

    @asynccontextmanager
    async def chat_turn(self, chat_id: str) -> AsyncIterator[None]:
        """Serialize handling within a chat; the lock is dropped once nobody uses it."""
        lock, users = self._chat_locks.get(chat_id, (asyncio.Lock(), 0))
        self._chat_locks[chat_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._chat_locks[chat_id]
            if users == 1:
                del self._chat_locks[chat_id]
            else:
                self._chat_locks[chat_id] = (lock, users - 1)

    async def _on_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.message is None or not update.message.text:
            return
        chat_id = str(update.message.chat_id)
        user = update.effective_user
        client_id = str(user.id) if user else chat_id
        logger.info(f"Telegram message in chat {chat_id} ({len(update.message.text)} chars)")

        async with self.chat_turn(chat_id):
            typing = asyncio.create_task(self._typing_loop(context, chat_id))
            try:
                reply = await answer_message(
                    self._consultant,
                    self._store,
                    chat_id,
                    update.message.text,
                    client_id=client_id,
                    timeout_seconds=self._settings.workflow_timeout_seconds,
                )
            finally:
                typing.cancel()
            await update.message.reply_text(reply.text)

    async def _typing_loop(self, context: ContextTypes.DEFAULT_TYPE, chat_id: str) -> None:
        try:
            while True:
                await context.bot.send_chat_action(chat_id=int(chat_id), action="typing")
                await asyncio.sleep(TYPING_INTERVAL_SECONDS)
        except asyncio.CancelledError:
            return
        except Exception:
            logger.exception(f"Typing indicator failed for chat {chat_id}")


def build_application(settings: Optional[Settings] = None) -> Application:
    """Build the polling application; the consultant is created on startup.

    Raises:
        ConfigurationError: If the provider key or the bot token is missing
    """
    settings = settings or get_settings()
    settings.validate_credentials(telegram=True)

    async def post_init(application: Application) -> None:
        configure_tracing(
            settings.tracing_backend,
            settings.appinsights_connection_string,
            settings.local_otlp_endpoint,
            settings.enable_sensitive_data,
        )
        store = await create_session_store(settings)
        application.bot_data["store"] = store
        ConsultantBot(settings, ConsultantService.from_settings(settings), store).register(application)
        logger.info("Telegram bot started")

    async def post_shutdown(application: Application) -> None:
        store = application.bot_data.get("store")
        if store is not None:
            await store.close()

    return (
        Application.builder()
        .token(settings.telegram_bot_token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    build_application().run_polling(allowed_updates=["message"], drop_pending_updates=True)


if __name__ == "__main__":
    main()
