import logging
import yaml
from typing import Dict, List, Optional
from pathlib import Path
from pydantic import BaseModel

from .bus import MessageBus
from .schemas import CameraStatus
from ..camera_config import CameraConfig
from ..node import CameraNode

log = logging.getLogger(__name__)


class NodeManager:
    def __init__(self, bus: Optional[MessageBus] = None, **node_options):
        self.bus = bus or MessageBus()
        # forwarded to every CameraNode, e.g. source_factory
        self.node_options = node_options
        self.nodes: Dict[str, CameraNode] = {}

    def load_from_config(self, cfg_path: Path):
        cfg_path = Path(cfg_path)
        cfg = yaml.safe_load(cfg_path.read_text()) or {}
        for entry in cfg.get('cameras', []):
            node_id = entry['id']
            kind = entry.get('kind', 'camera')
            params = CameraConfig(**entry.get('params', {})).resolve(cfg_path.parent)
            self.register(CameraNode(node_id, params, self.bus, kind=kind, **self.node_options))

    def register(self, node: CameraNode) -> bool:
        if node.node_id in self.nodes:
            raise ValueError(f"duplicate camera id {node.node_id}")
        self.nodes[node.node_id] = node
        return node.start()

    def get(self, node_id: str) -> Optional[CameraNode]:
        return self.nodes.get(node_id)

    def list(self) -> List[CameraStatus]:
        return [n.status() for n in self.nodes.values()]

    def latest(self, topic: str) -> Optional[BaseModel]:
        return self.bus.latest(topic)

    def stop_all(self):
        for node in self.nodes.values():
            node.stop()
        log.info("stopped %d camera node(s)", len(self.nodes))


manager = NodeManager()
