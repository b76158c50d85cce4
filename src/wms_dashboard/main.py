from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Callable, Sequence

from wms_client_sdk import ConfigError, OrderStatus, ReportKind, load_config

from wms_dashboard.app.bootstrap import DashboardBootstrap
from wms_dashboard.app.state import Route
from wms_dashboard.config import DashboardConfigError, load_dashboard_config
from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.transfer_orchestrator import TransferStatus

logger = logging.getLogger(__name__)


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _latest_notification(view: Any) -> dict[str, Any] | None:
    return view.notifications.latest


def _cmd_login(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    user = app.state.user
    _print({"username": user.username if user else None, "display_name": user.display_name if user else None})
    return 0


def _cmd_logout(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    result = app.logout()
    _print({"route": result.route.value, "status": app.state.status_message})
    return 0


def _cmd_whoami(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    try:
        user = app.auth_service.refresh()
    except ServiceError as exc:
        _print({"error": exc.message, "trace_id": exc.trace_id})
        return 1
    _print(user.model_dump(mode="json"))
    return 0 if user.is_authenticated else 1


def _cmd_warehouses(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.warehouses_view()
    if not view.load():
        _print({"error": view.table.error_message, "notification": _latest_notification(view)})
        return 1
    if args.sort:
        view.sort_by(args.sort)
    _print(view.render())
    return 0


def _cmd_warehouse(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.warehouse_detail_view(args.warehouse_id)
    ok = view.load()
    _print(view.render())
    return 0 if ok else 1


def _cmd_products(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.products_view()
    view.query = args.query or ""
    if not view.load(args.warehouse_id):
        _print({"error": view.table.error_message, "notification": _latest_notification(view)})
        return 1
    if args.sort:
        view.sort_by(args.sort)
    _print(view.render())
    return 0


def _cmd_product(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.product_detail_view(args.product_id)
    ok = view.load()
    _print(view.render())
    return 0 if ok else 1


def _cmd_dashboard(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.dashboard_view()
    ok = view.load()
    _print(view.render())
    return 0 if ok else 1


def _cmd_orders(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.orders_view()
    view.status_filter = OrderStatus(args.status) if args.status else None
    if not view.load():
        _print({"error": view.table.error_message, "notification": _latest_notification(view)})
        return 1
    if args.sort:
        view.sort_by(args.sort)
    _print(view.render())
    return 0


def _cmd_order(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.order_detail_view(args.order_id)
    ok = view.load()
    _print(view.render())
    return 0 if ok else 1


def _cmd_create_order(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.order_create_view()
    view.load()
    view.form.update(
        {
            "warehouse_id": args.warehouse_id,
            "client_name": args.client_name,
            "destination_address": args.destination_address,
            "comment": args.comment or "",
        }
    )
    for raw in args.item:
        product_id, _, quantity = raw.partition(":")
        view.add_item(int(product_id), int(quantity or 1))
    order = view.submit()
    _print(view.render())
    return 0 if order is not None else 1


def _cmd_transfer(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.warehouse_detail_view(args.from_warehouse)
    if not view.load():
        _print(view.render())
        return 1
    dialog = view.open_transfer(args.product_id)
    if dialog is None:
        _print({"error": f"Product #{args.product_id} has no stock at warehouse #{args.from_warehouse}"})
        return 1
    dialog.destination_warehouse_id = args.to_warehouse
    dialog.quantity = args.quantity
    dialog.create_follow_up_order = args.create_order
    outcome = view.submit_transfer()
    _print({"outcome": outcome.render() if outcome else None, "notifications": view.notifications.render()})
    return 0 if outcome is not None and outcome.status is TransferStatus.SUCCESS else 1


def _cmd_set_status(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.order_detail_view(args.order_id)
    if not view.load():
        _print(view.render())
        return 1
    outcome = view.set_status(args.status)
    _print(
        {
            "succeeded": bool(outcome and outcome.succeeded),
            "message": outcome.message if outcome else None,
            "stock_failures": [failure.product_id for failure in outcome.stock_failures] if outcome else [],
            "order": view.render()["order"],
        }
    )
    return 0 if outcome is not None and outcome.fully_succeeded else 1


def _cmd_cancel_order(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    view = app.order_detail_view(args.order_id)
    if not view.load():
        _print(view.render())
        return 1
    outcome = view.cancel(args.reason)
    _print({"succeeded": bool(outcome and outcome.succeeded), "message": outcome.message if outcome else None})
    return 0 if outcome is not None and outcome.succeeded else 1


def _cmd_report(app: DashboardBootstrap, args: argparse.Namespace) -> int:
    kind = ReportKind(args.kind)
    if kind is ReportKind.ORDER and args.order_id is None:
        _print({"error": "--order-id is required for an order report"})
        return 2
    try:
        saved = app.reports_service.download(kind, args.order_id)
    except ServiceError as exc:
        _print({"error": exc.message, "trace_id": exc.trace_id})
        return 1
    _print({"kind": saved.kind.value, "path": str(saved.path), "size_bytes": saved.size_bytes})
    return 0


COMMANDS: dict[str, Callable[[DashboardBootstrap, argparse.Namespace], int]] = {
    "login": _cmd_login,
    "logout": _cmd_logout,
    "whoami": _cmd_whoami,
    "dashboard": _cmd_dashboard,
    "warehouses": _cmd_warehouses,
    "warehouse": _cmd_warehouse,
    "products": _cmd_products,
    "product": _cmd_product,
    "orders": _cmd_orders,
    "order": _cmd_order,
    "create-order": _cmd_create_order,
    "transfer": _cmd_transfer,
    "set-status": _cmd_set_status,
    "cancel-order": _cmd_cancel_order,
    "report": _cmd_report,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wms-dashboard", description="Warehouse management dashboard client")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--username", default=os.getenv("WMS_USERNAME"))
    parser.add_argument("--password", default=os.getenv("WMS_PASSWORD"))
    parser.add_argument("--log-level", default=os.getenv("WMS_LOG_LEVEL", "WARNING"))
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("login", help="Sign in and print the current user")
    sub.add_parser("logout", help="Sign in, then end the server session")
    sub.add_parser("whoami", help="Print the user bound to the session")
    sub.add_parser("dashboard", help="Counts and the newest orders")

    warehouses = sub.add_parser("warehouses", help="List warehouses")
    warehouses.add_argument("--sort", default=None)
    warehouse = sub.add_parser("warehouse", help="One warehouse with its stock")
    warehouse.add_argument("warehouse_id", type=int)

    products = sub.add_parser("products", help="List products")
    products.add_argument("--warehouse-id", type=int, default=None)
    products.add_argument("--query", default=None)
    products.add_argument("--sort", default=None)
    product = sub.add_parser("product", help="One product with its per-warehouse stock")
    product.add_argument("product_id", type=int)

    orders = sub.add_parser("orders", help="List orders, newest first")
    orders.add_argument("--status", choices=[status.value for status in OrderStatus], default=None)
    orders.add_argument("--sort", default=None)
    order = sub.add_parser("order", help="One order")
    order.add_argument("order_id", type=int)

    create_order = sub.add_parser("create-order", help="Create an order")
    create_order.add_argument("--warehouse-id", type=int, required=True)
    create_order.add_argument("--client-name", required=True)
    create_order.add_argument("--destination-address", required=True)
    create_order.add_argument("--comment", default=None)
    create_order.add_argument("--item", action="append", default=[], help="PRODUCT_ID:QUANTITY, repeatable")

    transfer = sub.add_parser("transfer", help="Move stock between warehouses")
    transfer.add_argument("--product-id", type=int, required=True)
    transfer.add_argument("--from", dest="from_warehouse", type=int, required=True)
    transfer.add_argument("--to", dest="to_warehouse", type=int, required=True)
    transfer.add_argument("--quantity", type=int, required=True)
    transfer.add_argument("--create-order", action="store_true")

    set_status = sub.add_parser("set-status", help="Move an order to its next status")
    set_status.add_argument("order_id", type=int)
    set_status.add_argument("status", choices=[status.value for status in OrderStatus if status is not OrderStatus.CANCELLED])

    cancel = sub.add_parser("cancel-order", help="Cancel an order with a reason")
    cancel.add_argument("order_id", type=int)
    cancel.add_argument("--reason", required=True)

    report = sub.add_parser("report", help="Download a spreadsheet report")
    report.add_argument("kind", choices=[kind.value for kind in ReportKind])
    report.add_argument("--order-id", type=int, default=None)
    return parser


def run(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        app = DashboardBootstrap(config=load_config(args.env_file), dashboard_config=load_dashboard_config(args.env_file))
    except (ConfigError, DashboardConfigError) as exc:
        _print({"error": "config", "message": str(exc)})
        return 2

    if args.username and args.password:
        result = app.login(args.username, args.password)
        if result.route is Route.LOGIN:
            _print({"error": "auth", "message": result.error_message})
            return 1
    elif args.command == "login":
        _print({"error": "auth", "message": "--username and --password (or WMS_USERNAME/WMS_PASSWORD) are required"})
        return 2
    logger.info("command_start", extra={"command": args.command})
    return COMMANDS[args.command](app, args)


if __name__ == "__main__":
    raise SystemExit(run())
