from sqlalchemy import Column, Integer
from supermarket.models.common import CommonModel


class PromotionDetail(CommonModel):
    """
    Promotion detail row. Only the usage counter is maintained here.
    """
    __tablename__ = "promotion_details"

    detail_id = Column(Integer, primary_key=True, index=True)
    promotion_line_id = Column(Integer, nullable=True, index=True)
    usage_count = Column(Integer, nullable=False, default=0, server_default="0")
    usage_limit = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<PromotionDetail(detail_id={self.detail_id}, usage_count={self.usage_count}, usage_limit={self.usage_limit})>"
