import asyncio

from django.core.management.base import BaseCommand, CommandError

from orders.api import get_orders_client
from orders.collections import AdminOrderCollection, fetch_initial_orders
from orders.exceptions import InvalidOrderPayload, InvalidStatus
from orders.status import FILTER_ALL, FILTER_CHOICES
from orders.transport import (
    EVENT_CONNECT,
    EVENT_DISCONNECT,
    EVENT_JOIN_ADMIN,
    EVENT_NEW_ORDER,
    EVENT_ORDER_UPDATED,
    PushTransport,
)
from orders.types import Order


class Command(BaseCommand):
    help = 'Follow the orders service from the console: print the current orders, then live events'

    def add_arguments(self, parser):
        parser.add_argument(
            '--status',
            type=str,
            default=FILTER_ALL,
            choices=[key for key, _ in FILTER_CHOICES],
            help='Only list orders in this status (default: all)'
        )
        parser.add_argument(
            '--snapshot-only',
            action='store_true',
            help='Print the current orders and exit without listening for events'
        )

    def handle(self, *args, **options):
        collection = AdminOrderCollection(fetch_initial_orders(get_orders_client()))
        try:
            collection.set_filter(options['status'])
        except InvalidStatus as exc:
            raise CommandError(str(exc))

        self._print_orders(collection)
        if options['snapshot_only']:
            return

        try:
            asyncio.run(self._watch(collection))
        except KeyboardInterrupt:
            self.stdout.write('Stopped.')

    async def _watch(self, collection):
        async with PushTransport.from_settings() as transport:
            async def joined():
                await transport.emit(EVENT_JOIN_ADMIN)
                self.stdout.write(self.style.SUCCESS('Connected - real-time updates active'))

            def dropped():
                self.stdout.write(self.style.WARNING('Disconnected - trying to reconnect...'))

            def created(payload):
                order = self._decode(payload)
                if order is not None:
                    collection.apply_created(order)
                    self.stdout.write(self.style.SUCCESS(f'NEW     {self._line(order)}'))

            def updated(payload):
                order = self._decode(payload)
                if order is not None:
                    collection.apply_updated(order)
                    self.stdout.write(f'UPDATED {self._line(order)}')

            transport.on(EVENT_CONNECT, joined)
            transport.on(EVENT_DISCONNECT, dropped)
            transport.on(EVENT_NEW_ORDER, created)
            transport.on(EVENT_ORDER_UPDATED, updated)
            if not transport.connected:
                raise CommandError(f'Push channel unavailable at {transport.url}')
            await joined()
            await asyncio.Event().wait()

    def _decode(self, payload):
        try:
            return Order.from_payload(payload)
        except InvalidOrderPayload as exc:
            self.stderr.write(f'Ignoring unreadable event: {exc}')
            return None

    def _line(self, order):
        return (
            f'#{order.short_id}  {order.status_label:<10} {order.customer_name:<20} '
            f'${order.total_amount:.2f}  {order.created_display}'
        )

    def _print_orders(self, collection):
        stats = collection.stats()
        self.stdout.write(
            'Total {total} | pending {pending} | confirmed {confirmed} | '
            'preparing {preparing} | completed {completed}'.format(**stats)
        )
        orders = collection.visible()
        if not orders:
            self.stdout.write('No orders found')
            return
        for order in orders:
            self.stdout.write(self._line(order))
