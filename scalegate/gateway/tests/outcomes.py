"""Scale outcomes shared by the gateway tests."""

from scalegate.gateway.models.function import ScaleOutcome

READY = ScaleOutcome(available=True, found=True, duration=0.01)
SCALING = ScaleOutcome(available=False, found=True, duration=0.02)


def not_found(detail: str = "no such function") -> ScaleOutcome:
    return ScaleOutcome(available=False, found=False, error=Exception(detail), duration=0.01)


def failed(detail: str = "provider exploded") -> ScaleOutcome:
    return ScaleOutcome(available=False, found=True, error=Exception(detail), duration=0.01)
