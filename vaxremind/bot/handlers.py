"""Operator Telegram commands for the reminder service."""

from datetime import datetime, timezone
from typing import Optional

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from vaxremind.channels.base import DeliveryChannel
from vaxremind.errors import AbortedError
from vaxremind.services.scheduler import ReminderScheduler
from vaxremind.utils import logger

# Initialize router
router = Router()

# Initialize services (will be set in bot.py)
scheduler: Optional[ReminderScheduler] = None
channels: dict[str, DeliveryChannel] = {}
operator_chat_ids: set[int] = set()

started_at = datetime.now(timezone.utc)


def init_handlers(
    reminder_scheduler: ReminderScheduler,
    delivery_channels: dict[str, DeliveryChannel],
    operators: list[int],
):
    """Initialize handlers with service instances.

    Args:
        reminder_scheduler: Scheduler used for on-demand runs
        delivery_channels: Channels keyed by name, for the status report
        operators: Chat IDs allowed to use operator commands
    """
    global scheduler, channels, operator_chat_ids
    scheduler = reminder_scheduler
    channels = dict(delivery_channels)
    operator_chat_ids = set(operators)
    logger.info(f"Handlers initialized for {len(operator_chat_ids)} operator(s)")


def is_operator(message: Message) -> bool:
    """Check that the command comes from an allowed operator chat."""
    chat_id = message.chat.id
    if chat_id in operator_chat_ids:
        return True
    logger.warning(f"Rejected operator command from chat {chat_id}")
    return False


def format_channel_status() -> str:
    lines = ["Channels:"]
    for name, channel in channels.items():
        state = "configured" if channel.configured else "NOT configured"
        lines.append(f"{name}: {state}")
    return "\n".join(lines)


@router.message(Command("run_reminders"))
async def handle_run_reminders_command(message: Message):
    """Handle /run_reminders command - run reminders on demand.

    Args:
        message: Incoming message with /run_reminders command
    """
    if not is_operator(message):
        await message.answer("Not authorized.")
        return

    logger.info(f"On-demand reminder run requested from chat {message.chat.id}")
    await message.answer("Running vaccination reminders...")

    try:
        summary = await scheduler.run_now(trigger="operator")
    except AbortedError as e:
        logger.error(f"On-demand reminder run aborted: {e}")
        await message.answer(f"Reminder run failed: {e}")
        return
    except Exception as e:
        logger.exception(f"Error during on-demand reminder run: {e}")
        await message.answer("Reminder run failed with an internal error.")
        return

    await message.answer(f"Reminder job executed successfully.\n{summary.status_line()}")


@router.message(Command("channels"))
async def handle_channels_command(message: Message):
    """Handle /channels command - show which channels are configured."""
    if not is_operator(message):
        await message.answer("Not authorized.")
        return

    await message.answer(format_channel_status())


@router.message(Command("health"))
async def handle_health_command(message: Message):
    """Handle /health command - show uptime and last run."""
    if not is_operator(message):
        await message.answer("Not authorized.")
        return

    uptime = datetime.now(timezone.utc) - started_at
    uptime_hours = int(uptime.total_seconds() // 3600)
    uptime_minutes = int((uptime.total_seconds() % 3600) // 60)

    lines = [
        "Reminder service is running",
        f"Uptime: {uptime_hours}h {uptime_minutes}m",
        f"Daily scheduler: {'active' if scheduler and scheduler.is_running else 'stopped'}",
    ]
    if scheduler and scheduler.last_run_at:
        lines.append(f"Last run at: {scheduler.last_run_at.strftime('%Y-%m-%d %H:%M')} UTC")
    if scheduler and scheduler.last_summary:
        lines.append(f"Last run: {scheduler.last_summary.status_line()}")
    else:
        lines.append("Last run: none yet")

    await message.answer("\n".join(lines))
