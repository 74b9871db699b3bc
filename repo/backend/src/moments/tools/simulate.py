from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

from moments.application.notifications.dispatcher import NotificationDispatcher
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.sync.device_view import DeviceView
from moments.application.use_cases.advance_moment import AdvanceMoment
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.mark_moment_ready import MarkMomentReady
from moments.application.use_cases.seat_table import RecordSeated, SelectPairing
from moments.application.use_cases.select_menu import SelectMenu
from moments.domain.common.ids import MenuId
from moments.domain.notification.entities import Role
from moments.domain.table.entities import table_id_for
from moments.infrastructure.bootstrap.seed import build_store
from moments.infrastructure.messaging.local_bus import LocalSyncBus
from moments.infrastructure.platform.console import ConsoleNotifier, TerminalBell

SESSION_ID = "simulation"


def _device(role: Role, stream: TextIO, sound: bool) -> DeviceView:
    dispatcher = NotificationDispatcher(
        audio=TerminalBell(stream),
        notifier=ConsoleNotifier(prefix=role.value, stream=stream),
    )
    view = DeviceView(session_id=SESSION_ID, dispatcher=dispatcher)
    view.login(role)
    view.set_sound_enabled(sound)
    return view


def run(
    table_number: str,
    menu_id: str,
    pax: int,
    pairing: str,
    sound: bool = True,
    stream: TextIO | None = None,
) -> int:
    """Play one table through a full service and return the archived count."""
    out = stream or sys.stdout
    store = build_store()
    bus = LocalSyncBus()
    broadcaster = SyncBroadcaster(
        publisher=bus, session_id=SESSION_ID, next_revision=store.next_revision
    )
    floor = _device(Role.FLOOR, out, sound)
    kitchen = _device(Role.KITCHEN, out, sound)
    floor.attach(bus)
    kitchen.attach(bus)

    trace_ctx = TraceContext(trace_id=None, request_id="simulation")
    table_id = table_id_for(table_number)
    advance = AdvanceMoment(store=store, broadcaster=broadcaster)
    ready = MarkMomentReady(store=store, broadcaster=broadcaster)

    SelectMenu(store=store, broadcaster=broadcaster).execute(
        table_id=table_id, menu_id=MenuId(menu_id), trace_ctx=trace_ctx
    )
    RecordSeated(store=store, broadcaster=broadcaster).execute(
        table_id=table_id, pax=pax, language=None, trace_ctx=trace_ctx
    )
    SelectPairing(store=store, broadcaster=broadcaster).execute(
        table_id=table_id, pairing=pairing, trace_ctx=trace_ctx
    )

    while True:
        table = advance.execute(table_id=table_id, trace_ctx=trace_ctx)
        if table.menu is None:
            break
        out.write(f"table {table.number}: moment {table.currentLabel} ({table.currentCourse})\n")
        ready.execute(table_id=table_id, trace_ctx=trace_ctx)

    out.write(f"service finished; floor view holds {len(floor.history)} archived service(s)\n")
    return len(kitchen.history)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run one table through a full service with floor and kitchen views."
    )
    parser.add_argument("--table", default="10", help="Table number from the roster.")
    parser.add_argument("--menu", default="m1", help="Menu id to serve.")
    parser.add_argument("--pax", type=int, default=2)
    parser.add_argument("--pairing", default="Essencial")
    parser.add_argument("--mute", action="store_true", help="Disable the alert tone.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    run(
        table_number=args.table,
        menu_id=args.menu,
        pax=args.pax,
        pairing=args.pairing,
        sound=not args.mute,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
