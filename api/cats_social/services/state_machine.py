from enum import Enum


class MatchStatus(str, Enum):
    WAITING = "waiting"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


TERMINAL_STATUSES = {MatchStatus.ACCEPTED.value, MatchStatus.REJECTED.value}


def transition_status(current: str, action: str) -> str:
    if current in TERMINAL_STATUSES:
        return current

    if current == MatchStatus.WAITING.value:
        if action == "accept":
            return MatchStatus.ACCEPTED.value
        if action == "reject":
            return MatchStatus.REJECTED.value

    return current


def action_for_status(status: str) -> str:
    if status == MatchStatus.ACCEPTED.value:
        return "accept"
    if status == MatchStatus.REJECTED.value:
        return "reject"
    raise ValueError(f"no action leads to status {status!r}")
