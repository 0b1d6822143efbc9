"""
DestinationRule 与 VirtualService 共用的结构
"""
from dataclasses import dataclass
from typing import Optional

from istio_crd_schema.codec import RecordNode, UINT32, optional


@dataclass
class PortSelector:
    """目标服务上的端口"""
    number: Optional[int] = None  # 端口号


PORT_SELECTOR = RecordNode(PortSelector, [
    optional('number', 'number', UINT32),
])
