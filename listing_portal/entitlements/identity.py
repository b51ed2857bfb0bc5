"""
Identity resolution: current user -> owning company -> company type name.

The chain is strictly sequential and each step has its own failure mode:

    UNRESOLVED
      -> USER_FAILED                  (terminal, fatal: error is set)
      -> USER_RESOLVED
           -> COMPANY_UNRESOLVED      (terminal, soft: user kept, no type)
           -> COMPANY_RESOLVED
                -> TYPE_NAME_UNRESOLVED (terminal, soft)
                -> RESOLVED

Only USER_FAILED surfaces an error. The admin flag is derived from the user
record alone, so it survives company-side failures.

Repeated refetch() calls are ordered by invocation: every call takes a
monotonically increasing token and a finished chain is applied only if its
token is newer than the last applied one. A superseded chain that finishes
late is discarded.

Each resolver remembers a fingerprint of the credentials its runs forward.
When a later request for the same session carries different credentials
(for example after logging in), the chain is re-run.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from listing_portal.entitlements.models import CompanyRecord, Identity, UserRecord
from listing_portal.platform.errors import PortalApiError

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = "Not authenticated"
AUTH_FAILED_MESSAGE = "Auth check failed"
DEFAULT_MAX_SESSIONS = 10000


class ResolutionStage(str, Enum):
    UNRESOLVED = "unresolved"
    USER_FAILED = "user_failed"
    USER_RESOLVED = "user_resolved"
    COMPANY_UNRESOLVED = "company_unresolved"
    COMPANY_RESOLVED = "company_resolved"
    TYPE_NAME_UNRESOLVED = "type_name_unresolved"
    RESOLVED = "resolved"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STAGES

    @property
    def is_fatal(self) -> bool:
        return self is ResolutionStage.USER_FAILED


TERMINAL_STAGES = frozenset({
    ResolutionStage.USER_FAILED,
    ResolutionStage.COMPANY_UNRESOLVED,
    ResolutionStage.TYPE_NAME_UNRESOLVED,
    ResolutionStage.RESOLVED,
})


@dataclass(frozen=True)
class ChainOutcome:
    """Result of one complete run of the identity chain."""

    stage: ResolutionStage
    user: Optional[UserRecord] = None
    company: Optional[CompanyRecord] = None
    company_type_name: str = ""
    error: Optional[str] = None

    def to_identity(self, loading: bool = False) -> Identity:
        return Identity(
            user=self.user,
            company=self.company,
            company_type_name=self.company_type_name,
            is_admin=bool(self.user and self.user.is_admin),
            loading=loading,
            error=None if loading else self.error,
        )


async def run_identity_chain(client: Any) -> ChainOutcome:
    """
    Run user -> company -> company type name against a portal client.

    Never raises PortalApiError; every failure is folded into the outcome.
    """
    try:
        user_payload = await client.get_current_user()
    except PortalApiError as e:
        return ChainOutcome(stage=ResolutionStage.USER_FAILED, error=e.message or AUTH_FAILED_MESSAGE)
    if not user_payload:
        return ChainOutcome(stage=ResolutionStage.USER_FAILED, error=NOT_AUTHENTICATED_MESSAGE)

    user = UserRecord.from_payload(user_payload)

    try:
        company_payload = await client.get_owning_company()
    except PortalApiError as e:
        logger.warning(
            "Company lookup failed, continuing without company type",
            extra={"user_id": user.user_id, "status_code": e.status_code},
        )
        return ChainOutcome(stage=ResolutionStage.COMPANY_UNRESOLVED, user=user)
    if not company_payload:
        return ChainOutcome(stage=ResolutionStage.COMPANY_UNRESOLVED, user=user)

    company = CompanyRecord.from_payload(company_payload)
    if not company.company_type_id:
        return ChainOutcome(stage=ResolutionStage.TYPE_NAME_UNRESOLVED, user=user, company=company)

    try:
        company_type_name = await client.get_company_type_name(company.company_type_id)
    except PortalApiError as e:
        logger.warning(
            "Company type lookup failed, continuing without company type",
            extra={"user_id": user.user_id, "status_code": e.status_code},
        )
        return ChainOutcome(stage=ResolutionStage.TYPE_NAME_UNRESOLVED, user=user, company=company)

    stage = ResolutionStage.RESOLVED if company_type_name else ResolutionStage.TYPE_NAME_UNRESOLVED
    return ChainOutcome(stage=stage, user=user, company=company, company_type_name=company_type_name)


class IdentityResolver:
    """
    Holds the identity of one browser session.

    Args:
        client_factory: Returns a portal client for one chain run; the client
            is closed after the run if it exposes close()
        credentials_key: Fingerprint of the credentials client_factory forwards
    """

    def __init__(self, client_factory: Callable[[], Any], credentials_key: str = ""):
        self.client_factory = client_factory
        self.credentials_key = credentials_key
        self._issued = 0
        self._applied_token = 0
        self._rerun_pending = False
        self._outcome = ChainOutcome(stage=ResolutionStage.UNRESOLVED)
        self._latest_task: Optional[asyncio.Task] = None

    @property
    def loading(self) -> bool:
        return self._issued == 0 or self._issued > self._applied_token

    @property
    def stage(self) -> ResolutionStage:
        return self._outcome.stage

    @property
    def snapshot(self) -> Identity:
        return self._outcome.to_identity(loading=self.loading)

    def _next_token(self) -> int:
        self._rerun_pending = False
        self._issued += 1
        return self._issued

    def rebind(self, client_factory: Callable[[], Any], credentials_key: str) -> bool:
        """
        Use client_factory for later runs.

        Returns True when credentials_key differs from the previous one; if a
        run was already issued, the next ensure_started() re-runs the chain.
        """
        self.client_factory = client_factory
        if credentials_key == self.credentials_key:
            return False
        self.credentials_key = credentials_key
        self._rerun_pending = self._issued > 0
        return True

    async def refetch(self) -> Identity:
        """Re-run the whole chain; returns the snapshot after this run."""
        return await self._run(self._next_token())

    async def _run(self, token: int) -> Identity:
        try:
            outcome = await self._run_chain()
        except Exception:
            # Anything the chain does not fold itself (bad URL, factory error).
            logger.exception("Identity resolution raised", extra={"token": token})
            outcome = ChainOutcome(stage=ResolutionStage.USER_FAILED, error=AUTH_FAILED_MESSAGE)
        self._apply(token, outcome)
        return self.snapshot

    async def _run_chain(self) -> ChainOutcome:
        client = self.client_factory()
        try:
            return await run_identity_chain(client)
        finally:
            close = getattr(client, "close", None)
            if close is not None:
                await close()

    def _apply(self, token: int, outcome: ChainOutcome) -> None:
        if token <= self._applied_token:
            logger.debug("Discarding superseded identity resolution", extra={"token": token})
            return
        self._applied_token = token
        self._outcome = outcome
        if outcome.stage.is_fatal:
            logger.warning("Identity resolution failed", extra={"stage": outcome.stage.value, "error": outcome.error})
        else:
            logger.info(
                "Identity resolved",
                extra={
                    "stage": outcome.stage.value,
                    "company_type": outcome.company_type_name,
                    "is_admin": bool(outcome.user and outcome.user.is_admin),
                },
            )

    def start_refetch(self) -> asyncio.Task:
        """Schedule refetch() on the running loop and remember the task."""
        self._latest_task = asyncio.get_running_loop().create_task(self._run(self._next_token()))
        return self._latest_task

    def ensure_started(self) -> Optional[asyncio.Task]:
        """
        Start the first resolution if none was ever started, or a re-run
        after the credentials changed.

        Returns the in-flight task, or None when nothing is in flight on
        the running loop.
        """
        task = self._latest_task
        if task is not None and task.get_loop() is not asyncio.get_running_loop():
            # Bound to another event loop; cannot be awaited here.
            self._latest_task = task = None
            if self.loading:
                return self.start_refetch()
        if self._issued == 0 or self._rerun_pending:
            return self.start_refetch()
        if task is not None and not task.done():
            return task
        return None

    async def wait_until_settled(self, timeout: float) -> Identity:
        """
        Wait up to `timeout` seconds for the latest chain; never raises on
        timeout, the snapshot simply stays loading.
        """
        task = self.ensure_started()
        if task is not None:
            try:
                await asyncio.wait_for(asyncio.shield(task), timeout)
            except asyncio.TimeoutError:
                logger.info("Identity still resolving after wait", extra={"timeout": timeout})
        return self.snapshot


class IdentityRegistry:
    """One IdentityResolver per browser session, bounded LRU."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        self._max_sessions = max_sessions
        self._resolvers: "OrderedDict[str, IdentityResolver]" = OrderedDict()

    def get_or_create(
        self,
        session_id: str,
        client_factory: Callable[[], Any],
        credentials_key: str = "",
    ) -> IdentityResolver:
        resolver = self._resolvers.get(session_id)
        if resolver is None:
            resolver = IdentityResolver(client_factory, credentials_key)
            self._resolvers[session_id] = resolver
            while len(self._resolvers) > self._max_sessions:
                self._resolvers.popitem(last=False)
        else:
            # Latest request's credentials drive the next run.
            if resolver.rebind(client_factory, credentials_key):
                logger.info("Portal credentials changed, identity will be re-resolved")
            self._resolvers.move_to_end(session_id)
        return resolver

    def get(self, session_id: str) -> Optional[IdentityResolver]:
        return self._resolvers.get(session_id)

    def __len__(self) -> int:
        return len(self._resolvers)
