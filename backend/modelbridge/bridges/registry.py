"""Bridge Registry - validated bridges keyed by id and by source/target pair."""

from modelbridge.bridges.bridge import Bridge, BridgeExecutor, validate_bridge
from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)


class BridgeRegistry:
    """
    Registry of reusable bridges.

    Invalid bridges are rejected with a warning rather than an exception.
    A later bridge for the same source/target pair replaces the earlier one.
    """

    def __init__(self) -> None:
        self._bridges: dict[str, Bridge] = {}
        self._by_pair: dict[tuple[str, str], str] = {}

    def register(self, bridge: Bridge) -> bool:
        if not validate_bridge(bridge):
            logger.warning(f"Rejected invalid bridge: {getattr(bridge, 'id', None)!r}")
            return False

        previous = self._by_pair.get((bridge.source, bridge.target))
        if previous is not None and previous != bridge.id:
            self._bridges.pop(previous, None)

        replaced = self._bridges.get(bridge.id)
        if replaced is not None:
            self._by_pair.pop((replaced.source, replaced.target), None)

        self._bridges[bridge.id] = bridge
        self._by_pair[(bridge.source, bridge.target)] = bridge.id
        logger.info(f"Registered bridge {bridge.id}: {bridge.source} -> {bridge.target}")
        return True

    def get(self, bridge_id: str) -> Bridge | None:
        return self._bridges.get(bridge_id)

    def get_bridge(self, source: str, target: str) -> Bridge | None:
        bridge_id = self._by_pair.get((source, target))
        return self._bridges.get(bridge_id) if bridge_id else None

    def get_executor(self, source: str, target: str) -> BridgeExecutor | None:
        bridge = self.get_bridge(source, target)
        return BridgeExecutor(bridge) if bridge else None

    def list_bridges(self) -> list[Bridge]:
        return list(self._bridges.values())

    def __len__(self) -> int:
        return len(self._bridges)
