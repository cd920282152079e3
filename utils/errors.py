# utils/errors.py
"""Error types shared by the Gemini clients, the backend and the UI."""


class AuraError(Exception):
    """Base class. `kind` travels over HTTP so the UI can rebuild the error."""

    kind = "GenericFailure"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class PermissionDenied(AuraError):
    kind = "PermissionDenied"


class SynthesisRefused(AuraError):
    kind = "SynthesisRefused"

    def __init__(self, message: str, safety: bool = False):
        super().__init__(message)
        self.safety = safety

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["safety"] = self.safety
        return payload


class SynthesisFailed(AuraError):
    kind = "SynthesisFailed"


class AnalysisEmpty(AuraError):
    kind = "AnalysisEmpty"


class AnalysisUnparseable(AuraError):
    kind = "AnalysisUnparseable"


class GenericFailure(AuraError):
    kind = "GenericFailure"


ERROR_KINDS = {
    cls.kind: cls
    for cls in (
        PermissionDenied,
        SynthesisRefused,
        SynthesisFailed,
        AnalysisEmpty,
        AnalysisUnparseable,
        GenericFailure,
    )
}


def error_from_payload(payload: dict) -> AuraError:
    """Rebuild a typed error from a backend `{"error", "kind"}` body."""
    message = payload.get("error") or "Unknown backend error"
    cls = ERROR_KINDS.get(payload.get("kind"), GenericFailure)
    if cls is SynthesisRefused:
        return cls(message, safety=bool(payload.get("safety")))
    return cls(message)
