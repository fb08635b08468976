from __future__ import annotations

from typing import Callable

from app.clients.auth_client import AuthCollaborator
from app.clients.host import Scheduler, SignalBus
from app.clients.navigation import Navigator
from app.core.logging import get_logger
from app.schemas.enums import Phase
from app.schemas.responses import WarningView
from app.services.activity_monitor import ActivityMonitor
from app.services.path_policy import PathPolicy
from app.services.session_policy import SessionPolicy
from app.services.session_verifier import SessionVerifier
from app.services.timer_coordinator import TimerCoordinator
from app.services.warning_presenter import RenderCallback, WarningPresenter

logger = get_logger(__name__)


class AutoLogoutController:
    """Session activity & auto-logout guard for one navigation context.

    Path policy gates everything: on a guarded route the controller is attached
    (activity listeners, idle timers, session poll); on an excluded route it is
    fully detached. Navigating between guarded routes counts as activity.
    """

    def __init__(
        self,
        policy: SessionPolicy,
        scheduler: Scheduler,
        signals: SignalBus,
        auth: AuthCollaborator,
        navigator: Navigator,
        on_render: RenderCallback | None = None,
    ) -> None:
        self._policy = policy
        self._scheduler = scheduler
        self._auth = auth
        self._navigator = navigator
        self._on_render = on_render
        self._path_policy = PathPolicy(policy.excluded_path_prefixes)
        self._monitor = ActivityMonitor(
            signals, policy.activity_signal_kinds, self._on_activity
        )
        self._verifier = SessionVerifier(
            scheduler,
            auth,
            policy.session_check_interval_seconds,
            self._on_session_missing,
        )
        self._coordinator: TimerCoordinator | None = None
        self._presenter: WarningPresenter | None = None
        self._unsubscribe_navigation: Callable[[], None] | None = None

    @property
    def policy(self) -> SessionPolicy:
        return self._policy

    @property
    def guarded(self) -> bool:
        return self._path_policy.is_guarded(self._navigator.current_path)

    @property
    def attached(self) -> bool:
        return self._coordinator is not None

    @property
    def phase(self) -> Phase | None:
        return self._coordinator.phase if self._coordinator is not None else None

    @property
    def warning(self) -> WarningView:
        if self._presenter is None:
            return WarningView(message=self._policy.warning_message)
        return self._presenter.view

    def remaining_seconds(self) -> float | None:
        if self._coordinator is None:
            return None
        return self._coordinator.remaining_seconds()

    def start(self) -> None:
        if self._unsubscribe_navigation is not None:
            return
        self._unsubscribe_navigation = self._navigator.subscribe(self._on_navigate)
        self._evaluate(self._navigator.current_path)

    def dispose(self) -> None:
        if self._unsubscribe_navigation is not None:
            self._unsubscribe_navigation()
            self._unsubscribe_navigation = None
        self.detach()

    def stay_logged_in(self) -> None:
        if self._presenter is not None:
            self._presenter.stay_logged_in()

    def logout_now(self) -> None:
        if self._presenter is not None:
            self._presenter.logout_now()

    def attach(self) -> None:
        if self._coordinator is not None:
            return
        coordinator = TimerCoordinator(
            self._policy, self._scheduler, self._auth, self._navigator
        )
        self._coordinator = coordinator
        self._presenter = WarningPresenter(
            coordinator,
            self._scheduler,
            self._policy.warning_message,
            on_render=self._on_render,
        )
        self._monitor.attach()
        self._verifier.start()
        coordinator.start()
        logger.info("auto_logout_attached", path=self._navigator.current_path)

    def detach(self) -> None:
        if self._coordinator is None:
            return
        self._monitor.detach()
        self._verifier.stop()
        if self._presenter is not None:
            self._presenter.close()
        self._coordinator.stop()
        self._coordinator = None
        self._presenter = None
        logger.info("auto_logout_detached", path=self._navigator.current_path)

    def _on_navigate(self, path: str) -> None:
        self._evaluate(path)

    def _evaluate(self, path: str) -> None:
        if not self._path_policy.is_guarded(path):
            self.detach()
            return
        if self._coordinator is None:
            self.attach()
        elif self._coordinator.phase is Phase.LOGGED_OUT:
            # A logged-out attachment is never revived; guard the new route afresh
            self.detach()
            self.attach()
        else:
            self._coordinator.reset_timers()

    def _on_activity(self) -> None:
        if self._coordinator is not None:
            self._coordinator.reset_timers()

    def _on_session_missing(self) -> None:
        if self._coordinator is not None:
            self._coordinator.force_logout("session_missing", sign_out=False)
