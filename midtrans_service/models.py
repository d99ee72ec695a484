from sqlalchemy import Column, String, Integer
from midtrans_service.database import Base

class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String, unique=True, index=True, nullable=False)
    status = Column(String, nullable=False)        # pending | capture | settlement | deny | expire | cancel
    price = Column(Integer)
    customer_first_name = Column(String)
    customer_email = Column(String)
    item_name = Column(String)
    checkout_link = Column(String, nullable=True)  # Snap redirect_url
