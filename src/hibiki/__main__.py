"""アプリケーションのエントリポイント"""

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

from hibiki.application.handlers import ChatCommandHandler, ChatMessageHandler
from hibiki.application.services import (
    AutoReplyService,
    ContextCache,
    StreamRenderer,
    ToolEffectDispatcher,
)
from hibiki.config import ConfigError, LoggingConfig, load_config
from hibiki.infrastructure.events import AsyncioScheduler
from hibiki.infrastructure.llm import (
    JinjaPromptBuilder,
    LLMClient,
    LLMQuestionJudgment,
    OpenRouterUsageClient,
)
from hibiki.infrastructure.llm.strands import (
    EffectToolsFactory,
    StrandsModelProvider,
    StrandsResponseStreamer,
)
from hibiki.infrastructure.persistence import (
    DatabaseManager,
    SQLiteAutoReplyRuleRepository,
    SQLiteChatSettingRepository,
    SQLiteMemoryRepository,
    SQLitePromptRepository,
)
from hibiki.infrastructure.slack import (
    SlackConnection,
    SlackEventAdapter,
    SlackMessagingService,
    render_mrkdwn,
)
from hibiki.presentation import register_handlers

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def configure_telemetry() -> None:
    """OTEL_EXPORTER_OTLP_ENDPOINT が設定されていれば strands のトレースを送信する"""
    endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return

    os.environ.setdefault("OTEL_SERVICE_NAME", "hibiki")

    try:
        from strands.telemetry import StrandsTelemetry
    except ImportError:
        logger.warning(
            "strands telemetry is not installed; install strands-agents[otel]"
        )
        return

    try:
        telemetry = StrandsTelemetry()
        telemetry.setup_otlp_exporter()
        logger.info("Telemetry enabled: exporting traces to %s", endpoint)
    except Exception as e:
        logger.warning("Failed to setup telemetry: %s", e)


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            logging.getLogger(logger_name).setLevel(
                getattr(logging, logger_level.upper(), logging.INFO)
            )
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


async def main() -> None:
    """アプリケーションを起動する"""
    config_path = Path(os.environ.get("HIBIKI_CONFIG", "config.yaml"))
    if not config_path.exists():
        logger.error("%s not found", config_path)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    configure_logging(config.logging)
    configure_telemetry()

    connection = SlackConnection.from_config(config.slack)
    app = connection.app

    messaging_service = SlackMessagingService(app.client)
    bot_user_id = await messaging_service.get_bot_user_id()
    bot_name = await messaging_service.get_bot_user_name()

    db_manager = DatabaseManager(config.memory.database_path)
    await db_manager.create_tables()

    rule_repository = SQLiteAutoReplyRuleRepository(db_manager.get_session)
    memory_repository = SQLiteMemoryRepository(db_manager.get_session)
    prompt_repository = SQLitePromptRepository(db_manager.get_session)
    setting_repository = SQLiteChatSettingRepository(db_manager.get_session)

    scheduler = AsyncioScheduler()
    context_cache = ContextCache(config.context.max_message_window)
    rule_service = AutoReplyService(
        rule_repository, cache_ttl_seconds=config.response.rule_cache_ttl_seconds
    )
    dispatcher = ToolEffectDispatcher(
        rule_service=rule_service,
        memory_repository=memory_repository,
        scheduler=scheduler,
        messaging_service=messaging_service,
        formatter=render_mrkdwn,
    )

    debug_llm_messages = bool(config.logging and config.logging.debug_llm_messages)
    response_streamer = StrandsResponseStreamer(
        model_provider=StrandsModelProvider(config.agent),
        effect_tools_factory=EffectToolsFactory(dispatcher),
        debug_llm_messages=debug_llm_messages,
    )

    # Use judgment LLM config if available, otherwise use default
    judgment_llm_config = config.llm.get("judgment", config.llm["default"])
    question_judgment = LLMQuestionJudgment(LLMClient(judgment_llm_config))

    message_handler = ChatMessageHandler(
        messaging_service=messaging_service,
        response_streamer=response_streamer,
        renderer=StreamRenderer(show_reasoning=config.response.show_reasoning),
        rule_service=rule_service,
        dispatcher=dispatcher,
        context_cache=context_cache,
        memory_repository=memory_repository,
        prompt_repository=prompt_repository,
        chat_setting_repository=setting_repository,
        prompt_builder=JinjaPromptBuilder(persona_name=config.persona.name),
        question_judgment=question_judgment,
        response_config=config.response,
        default_prompt=config.persona.system_prompt,
        bot_user_id=bot_user_id,
        bot_name=bot_name,
        formatter=render_mrkdwn,
    )

    usage_client = OpenRouterUsageClient(config.usage) if config.usage else None
    command_handler = ChatCommandHandler(
        rule_service=rule_service,
        memory_repository=memory_repository,
        prompt_repository=prompt_repository,
        chat_setting_repository=setting_repository,
        default_prompt=config.persona.system_prompt,
        usage_fetcher=usage_client.fetch if usage_client else None,
    )

    register_handlers(
        app,
        message_handler,
        command_handler,
        SlackEventAdapter(app.client, bot_user_id=bot_user_id),
        bot_user_id,
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal...")
        stop_event.set()

    loop.add_signal_handler(signal.SIGINT, shutdown_handler)
    loop.add_signal_handler(signal.SIGTERM, shutdown_handler)

    logger.info("Starting %s...", config.persona.name)
    closed = await connection.serve(stop_event, close_timeout=5.0)

    logger.info("Shutting down...")
    if not closed:
        logger.warning("Slack connection did not close cleanly")
    await scheduler.shutdown()

    await db_manager.close()
    logger.info("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
