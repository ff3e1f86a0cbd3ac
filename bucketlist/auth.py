"""Authentication gate in front of the saved places.

An ``Authenticator`` runs the actual device challenge. Whatever it raises is
collapsed by ``classify`` into one of a handful of outcomes, each with fixed
alert copy, so the front end never sees platform error codes.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from enum import Enum
from typing import Awaitable, Callable, NamedTuple, Optional

from . import config
from .observable import Dispatch, Observable


class AuthErrorCode(str, Enum):
    """Result codes a device authentication challenge can report."""
    APP_CANCEL = "app_cancel"
    AUTHENTICATION_FAILED = "authentication_failed"
    BIOMETRY_DISCONNECTED = "biometry_disconnected"
    BIOMETRY_LOCKOUT = "biometry_lockout"
    BIOMETRY_NOT_AVAILABLE = "biometry_not_available"
    BIOMETRY_NOT_ENROLLED = "biometry_not_enrolled"
    BIOMETRY_NOT_PAIRED = "biometry_not_paired"
    INVALID_CONTEXT = "invalid_context"
    INVALID_DIMENSIONS = "invalid_dimensions"
    NOT_INTERACTIVE = "not_interactive"
    PASSCODE_NOT_SET = "passcode_not_set"
    SYSTEM_CANCEL = "system_cancel"
    TOUCH_ID_LOCKOUT = "touch_id_lockout"
    TOUCH_ID_NOT_AVAILABLE = "touch_id_not_available"
    TOUCH_ID_NOT_ENROLLED = "touch_id_not_enrolled"
    USER_CANCEL = "user_cancel"
    USER_FALLBACK = "user_fallback"
    WATCH_NOT_AVAILABLE = "watch_not_available"


class AuthError(Exception):
    """Failure reported by an authenticator."""

    def __init__(self, code: AuthErrorCode, description: str = ""):
        self.code = code
        self.description = description or code.value.replace("_", " ").capitalize()
        super().__init__(self.description)


class OutcomeKind(Enum):
    USER_CANCELLED = "user_cancelled"
    BIOMETRY_NOT_AVAILABLE = "biometry_not_available"
    BIOMETRY_NOT_ENROLLED = "biometry_not_enrolled"
    BIOMETRY_LOCKOUT = "biometry_lockout"
    PASSCODE_NOT_SET = "passcode_not_set"
    AUTHENTICATION_FAILED = "authentication_failed"
    UNKNOWN = "unknown"


class Alert(NamedTuple):
    title: str
    message: str


ALERTS = {
    OutcomeKind.USER_CANCELLED: Alert(
        "Cancelled", "Authentication was cancelled."),
    OutcomeKind.BIOMETRY_NOT_AVAILABLE: Alert(
        "Biometry unavailable", "Biometric authentication is not supported on this device."),
    OutcomeKind.BIOMETRY_NOT_ENROLLED: Alert(
        "Biometry not set up", "Set up Touch ID or Face ID in your device settings."),
    OutcomeKind.BIOMETRY_LOCKOUT: Alert(
        "Biometry locked", "Too many failed attempts. Use your device passcode."),
    OutcomeKind.PASSCODE_NOT_SET: Alert(
        "Passcode not set", "Set a device passcode in your settings."),
    OutcomeKind.AUTHENTICATION_FAILED: Alert(
        "Try again", "Authentication failed. Please try again."),
}
UNKNOWN_TITLE = "Unknown error"

_CODE_OUTCOMES = {
    AuthErrorCode.USER_CANCEL: OutcomeKind.USER_CANCELLED,
    AuthErrorCode.APP_CANCEL: OutcomeKind.USER_CANCELLED,
    AuthErrorCode.BIOMETRY_NOT_AVAILABLE: OutcomeKind.BIOMETRY_NOT_AVAILABLE,
    AuthErrorCode.TOUCH_ID_NOT_AVAILABLE: OutcomeKind.BIOMETRY_NOT_AVAILABLE,
    AuthErrorCode.BIOMETRY_NOT_ENROLLED: OutcomeKind.BIOMETRY_NOT_ENROLLED,
    AuthErrorCode.TOUCH_ID_NOT_ENROLLED: OutcomeKind.BIOMETRY_NOT_ENROLLED,
    AuthErrorCode.BIOMETRY_LOCKOUT: OutcomeKind.BIOMETRY_LOCKOUT,
    AuthErrorCode.TOUCH_ID_LOCKOUT: OutcomeKind.BIOMETRY_LOCKOUT,
    AuthErrorCode.PASSCODE_NOT_SET: OutcomeKind.PASSCODE_NOT_SET,
    AuthErrorCode.AUTHENTICATION_FAILED: OutcomeKind.AUTHENTICATION_FAILED,
}


class AuthenticationOutcome(NamedTuple):
    kind: OutcomeKind
    detail: str = ""

    @property
    def alert(self) -> Alert:
        if self.kind is OutcomeKind.UNKNOWN:
            return Alert(UNKNOWN_TITLE, self.detail)
        return ALERTS[self.kind]


def classify(error: BaseException) -> AuthenticationOutcome:
    """Map any authentication failure to exactly one outcome."""
    if isinstance(error, AuthError):
        kind = _CODE_OUTCOMES.get(error.code)
        if kind is not None:
            return AuthenticationOutcome(kind)
        return AuthenticationOutcome(OutcomeKind.UNKNOWN, error.description)
    return AuthenticationOutcome(OutcomeKind.UNKNOWN, str(error))


class Authenticator(ABC):
    """A device-level challenge (biometric, passcode, ...)."""

    @abstractmethod
    def can_evaluate(self) -> None:
        """Raise AuthError if no challenge can run on this device."""

    @abstractmethod
    async def evaluate(self, reason: str) -> None:
        """Run one challenge; return on success, raise on failure."""


def hash_passcode(passcode: str) -> str:
    return hashlib.sha256(passcode.encode("utf-8")).hexdigest()


PasscodePrompt = Callable[[str], Awaitable[Optional[str]]]


class PasscodeAuthenticator(Authenticator):
    """Challenge the user for a passcode whose SHA-256 digest is configured.

    ``prompt(reason)`` returns the entered passcode, or None if the user
    dismissed it.
    """

    def __init__(self, prompt: PasscodePrompt, passcode_sha256: Optional[str] = None,
                 max_attempts: Optional[int] = None):
        self.prompt = prompt
        if passcode_sha256 is None:
            passcode_sha256 = config.passcode_sha256
        if max_attempts is None:
            max_attempts = config.max_passcode_attempts
        self.passcode_sha256 = passcode_sha256
        self.max_attempts = max_attempts
        self.failed_attempts = 0

    def can_evaluate(self) -> None:
        if not self.passcode_sha256:
            raise AuthError(AuthErrorCode.PASSCODE_NOT_SET, "No passcode has been set.")
        if self.failed_attempts >= self.max_attempts:
            raise AuthError(AuthErrorCode.BIOMETRY_LOCKOUT, "Too many failed attempts.")

    async def evaluate(self, reason: str) -> None:
        entered = await self.prompt(reason)
        if entered is None:
            raise AuthError(AuthErrorCode.USER_CANCEL, "Authentication was cancelled by the user.")
        if not hmac.compare_digest(hash_passcode(entered), self.passcode_sha256.lower()):
            self.failed_attempts += 1
            if self.failed_attempts >= self.max_attempts:
                raise AuthError(AuthErrorCode.BIOMETRY_LOCKOUT, "Too many failed attempts.")
            raise AuthError(AuthErrorCode.AUTHENTICATION_FAILED, "Wrong passcode.")
        self.failed_attempts = 0


class AuthenticationGate(Observable):
    """Unlock state plus the alert to show after a failed attempt."""

    def __init__(self, authenticator: Authenticator, dispatch: Optional[Dispatch] = None,
                 reason: Optional[str] = None):
        super().__init__(dispatch)
        self.authenticator = authenticator
        self.reason = reason or config.auth_reason
        self.is_unlocked = False
        self.pending_alert: Optional[Alert] = None

    async def authenticate(self) -> None:
        """Run one challenge and publish the result."""
        try:
            self.authenticator.can_evaluate()
        except Exception as e:
            # The user never saw a prompt, so even a cancel code is reported
            self._fail(classify(e))
            return

        try:
            await self.authenticator.evaluate(self.reason)
        except Exception as e:
            outcome = classify(e)
            if outcome.kind is OutcomeKind.USER_CANCELLED:
                print("Authentication cancelled by user")
                return
            self._fail(outcome)
            return

        print("Authentication succeeded")
        self._publish(is_unlocked=True)

    def dismiss_alert(self) -> None:
        self.pending_alert = None
        self._notify("pending_alert")

    def _fail(self, outcome: AuthenticationOutcome) -> None:
        print(f"Authentication failed: {outcome.kind.value}")
        self._publish(is_unlocked=False, pending_alert=outcome.alert)
