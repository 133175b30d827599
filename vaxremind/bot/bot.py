"""Operator Telegram bot initialization and setup."""

from aiogram import Bot, Dispatcher
from loguru import logger

from vaxremind.bot import handlers
from vaxremind.channels.base import DeliveryChannel
from vaxremind.services.scheduler import ReminderScheduler


def init_bot(
    token: str,
    scheduler: ReminderScheduler,
    channels: dict[str, DeliveryChannel],
    operator_chat_ids: list[int],
) -> tuple[Bot, Dispatcher]:
    """Initialize bot and dispatcher with operator handlers.

    Args:
        token: Telegram bot token
        scheduler: Scheduler used for on-demand runs
        channels: Delivery channels for the status report
        operator_chat_ids: Chat IDs allowed to run operator commands

    Returns:
        Tuple of (Bot, Dispatcher) instances
    """
    logger.info("Initializing operator bot...")

    bot = Bot(token=token)
    dp = Dispatcher()

    handlers.init_handlers(scheduler, channels, operator_chat_ids)
    dp.include_router(handlers.router)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    if not operator_chat_ids:
        logger.warning("OPERATOR_CHAT_IDS is empty, operator commands will be rejected")

    logger.info("Operator bot initialized successfully")
    return bot, dp


async def on_startup(bot: Bot):
    """Handler called when bot starts."""
    bot_info = await bot.get_me()
    logger.info(f"Operator bot started: @{bot_info.username} (ID: {bot_info.id})")


async def on_shutdown(bot: Bot):
    """Handler called when bot shuts down."""
    logger.info("Operator bot shutting down...")
