"""Main entry point for the vaccination reminder service."""

import argparse
import asyncio
import signal
import sys
from dataclasses import dataclass
from datetime import date
from typing import Optional

import httpx

from vaxremind.channels import EmailChannel, SmsChannel
from vaxremind.config import Settings, load_settings
from vaxremind.data import ChildStore, SentLog
from vaxremind.errors import AbortedError, ConfigError
from vaxremind.services import NotificationDispatcher, ReminderRunner, ReminderScheduler
from vaxremind.utils import logger, setup_logger


@dataclass
class Services:
    """Wired service graph built from settings."""

    store: ChildStore
    sent_log: SentLog
    http_client: httpx.AsyncClient
    sms_channel: SmsChannel
    email_channel: EmailChannel
    dispatcher: NotificationDispatcher
    runner: ReminderRunner
    scheduler: ReminderScheduler


async def build_services(settings: Settings) -> Services:
    """Construct and wire all services from one settings object.

    Args:
        settings: Application settings

    Returns:
        Services container
    """
    store = ChildStore(settings.data_dir)

    sent_log = SentLog(settings.sent_log_path)
    await sent_log.init()

    # One connection pool for all SMS requests of the process
    http_client = httpx.AsyncClient(timeout=settings.sms.timeout)
    sms_channel = SmsChannel(settings.sms, client=http_client)
    email_channel = EmailChannel(settings.email)

    dispatcher = NotificationDispatcher(sms_channel, email_channel, sent_log=sent_log)
    runner = ReminderRunner(
        store,
        dispatcher,
        timezone_offset=settings.reminder_timezone_offset,
        max_concurrent_children=settings.max_concurrent_children,
    )
    scheduler = ReminderScheduler(
        runner,
        run_time=settings.daily_run_time,
        timezone_offset=settings.reminder_timezone_offset,
        sent_log=sent_log,
    )

    return Services(
        store=store,
        sent_log=sent_log,
        http_client=http_client,
        sms_channel=sms_channel,
        email_channel=email_channel,
        dispatcher=dispatcher,
        runner=runner,
        scheduler=scheduler,
    )


async def close_services(services: Services) -> None:
    """Release resources held by the service graph."""
    await services.http_client.aclose()
    logger.debug("HTTP client closed")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Vaccination reminder service")
    parser.add_argument(
        "--once",
        action="store_true",
        help="run reminders once and exit (on-demand trigger)",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="evaluate doses against this date (YYYY-MM-DD) instead of today",
    )
    return parser.parse_args(argv)


async def run_once(services: Services, today: Optional[date] = None) -> int:
    """Run reminders once and map the outcome to an exit code.

    Returns:
        0 when the run completed (even with failed deliveries), 1 when aborted
    """
    try:
        summary = await services.scheduler.run_now(trigger="cli", today=today)
    except AbortedError as e:
        logger.error(f"Reminder run aborted: {e}")
        print(f"Error: {e}")
        return 1

    print(summary.status_line())
    return 0 if summary.ok else 1


async def serve(settings: Settings, services: Services) -> None:
    """Run the daily scheduler (and the operator bot when configured) until a signal."""
    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    await services.scheduler.start()

    bot = dp = polling_task = None
    if settings.telegram_bot_token:
        from vaxremind.bot.bot import init_bot

        bot, dp = init_bot(
            settings.telegram_bot_token,
            services.scheduler,
            {"sms": services.sms_channel, "email": services.email_channel},
            settings.operator_chat_ids,
        )
        polling_task = asyncio.create_task(
            dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types(), handle_signals=False)
        )
        logger.info("Operator bot polling started")
    else:
        logger.info("TELEGRAM_BOT_TOKEN not set, operator bot disabled")

    await shutdown_event.wait()
    logger.info("Shutdown signal received, stopping services...")

    await services.scheduler.stop()

    if dp is not None:
        await dp.stop_polling()
        polling_task.cancel()
        try:
            await polling_task
        except asyncio.CancelledError:
            pass
        await bot.session.close()
        logger.info("Operator bot stopped")


async def main(argv: Optional[list[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logger(console_level=settings.log_level, logs_dir=settings.logs_dir)

    logger.info("=" * 60)
    logger.info("Starting vaccination reminder service")
    logger.info("=" * 60)
    logger.info(f"Configuration: {settings!r}")

    if not settings.sms.configured:
        logger.warning("SMS channel not configured (AT_USERNAME / AT_API_KEY missing)")
    if not settings.email.configured:
        logger.warning("Email channel not configured (SMTP_HOST / SMTP_USER / SMTP_PASSWORD missing)")

    services = await build_services(settings)

    try:
        if args.once:
            return await run_once(services, today=args.date)
        await serve(settings, services)
    finally:
        await close_services(services)

    logger.info("Vaccination reminder service stopped")
    return 0


def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Received KeyboardInterrupt, exiting...")
