"""
支付仓储接口 - 定义支付与争议数据访问的抽象接口
"""
from abc import ABC, abstractmethod
from typing import Optional, List

from .entity import Payment, Dispute, ProcessorState


class PaymentRepository(ABC):
    """支付仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def add(self, payment: Payment) -> Payment:
        """保存新支付并维护按课程的索引与计数（payment.id 由调用方分配）"""
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        """根据ID获取支付"""
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        """更新支付记录"""
        pass

    @abstractmethod
    async def list_ids_for_class(self, class_id: int) -> Optional[List[int]]:
        """按支付顺序返回课程的支付ID列表；课程从未收款时返回 None"""
        pass

    @abstractmethod
    async def count_for_class(self, class_id: int) -> int:
        """统计课程的支付数量"""
        pass


class DisputeRepository(ABC):
    """争议仓储抽象接口（以 payment_id 为键）"""

    @abstractmethod
    async def get(self, payment_id: int) -> Optional[Dispute]:
        pass

    @abstractmethod
    async def save(self, dispute: Dispute) -> Dispute:
        pass


class ProcessorStateRepository(ABC):
    """处理器配置与累计统计"""

    @abstractmethod
    async def load(self) -> ProcessorState:
        pass

    @abstractmethod
    async def save(self, state: ProcessorState) -> ProcessorState:
        pass
