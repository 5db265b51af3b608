"""Selection of Mullvad nodes to sign."""

from typing import Iterable, List

from mullsign.models import LockStatus, Peer, SignTarget

MULLVAD_NODE_SUFFIX = ".mullvad.ts.net."


def _matching(peers: Iterable[Peer]) -> List[SignTarget]:
    return [
        SignTarget(node_key=peer.node_key, name=peer.name)
        for peer in peers
        if peer.name.endswith(MULLVAD_NODE_SUFFIX)
    ]


def select(status: LockStatus, resign: bool = False) -> List[SignTarget]:
    """
    Build the signing worklist from a lock status.

    Filtered peers come first. With ``resign`` the visible peers are appended
    as well. A peer present in both lists is emitted twice; signing is
    idempotent, so duplicates are kept.

    Args:
        status: Current lock status
        resign: Also include peers that are already visible

    Returns:
        Ordered list of (node_key, name) targets, possibly empty
    """
    targets = _matching(status.filtered_peers)
    if resign:
        targets.extend(_matching(status.visible_peers))
    return targets
