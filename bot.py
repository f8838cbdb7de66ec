import logging

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)

from telegram import Update
from telegram.error import BadRequest, Forbidden, TimedOut, NetworkError
from telegram.ext import (
    ApplicationBuilder,
    CommandHandler,
    ConversationHandler,
    CallbackQueryHandler,
    ContextTypes,
)

from config import TG_BOT_TOKEN, PROXY_URL
from database.database import init_db
import handlers.start as hand_start
import handlers.drill as hand_drill
import handlers.help as hand_help
from utils.constants import DrillState

CATEGORY_PATTERN = '^category_(all|recite|perform)$'


def main() -> None:
    logging.info("Running main")

    builder = ApplicationBuilder().token(TG_BOT_TOKEN)
    if PROXY_URL:
        builder = builder.proxy(PROXY_URL).get_updates_proxy(PROXY_URL)
    application = builder.build()

    # Drill conversation
    drill_handler = ConversationHandler(
        entry_points=[
            CallbackQueryHandler(hand_drill.drill_category, pattern=CATEGORY_PATTERN)
        ],
        per_message=False,

        states={
            DrillState.STUDYING: [
                CallbackQueryHandler(hand_drill.flip_card, pattern='^flip$'),
                CallbackQueryHandler(hand_drill.mark_card, pattern='^mark_(correct|wrong)$'),
                CallbackQueryHandler(hand_drill.skip_card, pattern='^skip$'),
                CallbackQueryHandler(hand_drill.next_card, pattern='^next$'),
                CallbackQueryHandler(hand_drill.previous_card, pattern='^prev$'),
                CallbackQueryHandler(hand_drill.reset_deck, pattern='^reset$'),
                CallbackQueryHandler(hand_drill.restart_deck, pattern='^restart$'),
                CallbackQueryHandler(hand_drill.drill_category, pattern=CATEGORY_PATTERN),
                CallbackQueryHandler(hand_drill.leave_drill, pattern='^main_menu$'),
            ],
        },

        fallbacks=[CommandHandler('cancel', hand_drill.leave_drill)]
    )

    application.add_handler(CommandHandler('start', hand_start.start))
    application.add_handler(drill_handler)

    # Slash commands
    application.add_handler(CommandHandler('help', hand_help.help_command))

    # Standalone callback handlers
    application.add_handler(CallbackQueryHandler(hand_start.main_menu, pattern='^main_menu$'))
    application.add_handler(CallbackQueryHandler(hand_help.help_entry, pattern='^help$'))

    application.add_error_handler(error_handler)
    application.run_polling()


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Global error handler — logs the error and tries to notify the user."""
    error = context.error
    logging.error(f"Update {update} caused error: {error}", exc_info=error)

    if isinstance(error, Forbidden):
        logging.warning(f"Bot was blocked by user: {error}")
        return

    if isinstance(error, (TimedOut, NetworkError)):
        logging.warning(f"Network issue: {error}")
        return

    if isinstance(error, BadRequest):
        msg = str(error).lower()
        if "message is not modified" in msg or "query is too old" in msg:
            return
        logging.warning(f"Bad request: {error}")

    if isinstance(update, Update) and update.effective_chat:
        try:
            await context.bot.send_message(
                chat_id=update.effective_chat.id,
                text="\u26a0\ufe0f Something went wrong. Try /start to pick a deck again."
            )
        except (BadRequest, Forbidden, TimedOut, NetworkError) as e:
            logging.warning(f"Could not notify user about error: {e}")


if __name__ == '__main__':
    logging.info("Init db...")
    init_db()

    logging.info("Starting app")
    main()
