from __future__ import annotations

from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_admin import register as register_admin
from misc.commands.commands_community import register as register_community
from misc.commands.commands_spotlight import register as register_spotlight
from misc.commands.commands_weekly import register as register_weekly
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps
from misc.events_runtime import register_runtime_events


def wire_bot_runtime(
    bot,
    *,
    user_is_admin,
    send_chunked,
    timezone_name: str,
    channel_store,
    message_store,
    reactions_store,
    activity_store,
    analytics_store,
    feedback_store,
    spotlight_pool,
    composer,
    spotlight_service,
    quiz_service,
    presence,
    audit,
    schedule_state,
    feedback_panel_factory,
    scheduler_enabled: bool,
    scheduler_factory,
) -> None:
    command_deps = CommandDeps(
        send_chunked=send_chunked,
        timezone_name=timezone_name,
        channel_store=channel_store,
        message_store=message_store,
        reactions_store=reactions_store,
        activity_store=activity_store,
        analytics_store=analytics_store,
        feedback_store=feedback_store,
        spotlight_pool=spotlight_pool,
        composer=composer,
        spotlight_service=spotlight_service,
        quiz_service=quiz_service,
        presence=presence,
        audit=audit,
        schedule_state=schedule_state,
        feedback_panel_factory=feedback_panel_factory,
    )
    command_gates = CommandGates(
        user_is_admin=user_is_admin,
    )

    register_weekly(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_admin(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_spotlight(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_community(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            activity_store=activity_store,
            analytics_store=analytics_store,
            audit=audit,
            presence=presence,
        ),
        boot=RuntimeBootDeps(
            feedback_panel_factory=feedback_panel_factory,
            scheduler_enabled=scheduler_enabled,
            scheduler_factory=scheduler_factory,
        ),
    )
