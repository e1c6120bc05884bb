"""Application service: Transition Order use case.

Staff move an order through pending -> accepted -> ready -> completed,
or cancel it before it completes.  The Order aggregate decides whether a
move is legal; this handler adds the parts that need the outside world:
authorization, per-order serialization and the conditional store write.

Repeating a transition that already happened is rejected with
IllegalTransitionError.  Callers treat that as "already done".
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from canteen.application.dto import TransitionResult
from canteen.application.locking import KeyedLock
from canteen.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    IllegalTransitionError,
)
from canteen.domain.model.order import DEFAULT_ACTOR, OrderStatus, utcnow
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.service.authorization import AllowAllPolicy, AuthorizationPolicy

logger = logging.getLogger(__name__)


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        policy: AuthorizationPolicy | None = None,
        locks: KeyedLock | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._policy = policy or AllowAllPolicy()
        self._locks = locks if locks is not None else KeyedLock()
        self._clock = clock

    def handle(
        self,
        order_id: int,
        target_status: str | OrderStatus,
        actor: str | None = None,
        reason: str | None = None,
        note: str | None = None,
    ) -> TransitionResult:
        target = (
            target_status
            if isinstance(target_status, OrderStatus)
            else OrderStatus.parse(target_status)
        )

        with self._locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            self._policy.authorize_transition(actor or DEFAULT_ACTOR, target)

            previous = order.status
            try:
                order.transition_to(
                    target, actor=actor, reason=reason, note=note, now=self._clock()
                )
            except IllegalTransitionError:
                logger.warning(
                    "Rejected order #%s transition %s -> %s",
                    order_id, previous.value, target.value,
                )
                raise

            try:
                self._order_repo.update(order, expected_status=previous)
            except ConcurrencyConflictError as exc:
                current = self._order_repo.get_by_id(order_id)
                current_status = current.status.value if current else previous.value
                logger.warning(
                    "Order #%s changed concurrently (now %s); %s not applied",
                    order_id, current_status, target.value,
                )
                raise IllegalTransitionError(current_status, target.value) from exc

        logger.info(
            "Order #%s moved %s -> %s by %s",
            order_id, previous.value, target.value, order.history[-1].actor,
        )
        return TransitionResult(
            order_id=order_id,
            status=target.value,
            message=f"Order status updated to {target.value}",
        )
