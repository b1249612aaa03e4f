# pricer/db/models.py
from sqlalchemy import (
    CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from .db import Base


class OptionInput(Base):
    __tablename__ = "option_inputs"
    input_id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    spot = Column(Float, nullable=False)
    strike = Column(Float, nullable=False)
    rate = Column(Float, nullable=False)
    volatility = Column(Float, nullable=False)
    maturity = Column(Float, nullable=False)   # years
    steps = Column(Integer, nullable=False)    # 0 = closed form
    type = Column(String(4), nullable=False)
    outputs = relationship("OptionOutput", back_populates="input", cascade="all, delete",
                           passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("spot", "strike", "rate", "volatility", "maturity", "steps", "type",
                         name="uq_option_inputs_params"),
        CheckConstraint("type IN ('call', 'put')", name="ck_option_inputs_type"),
    )


class OptionOutput(Base):
    __tablename__ = "option_outputs"
    output_id = Column(Integer, primary_key=True, autoincrement=True)
    input_id = Column(Integer, ForeignKey("option_inputs.input_id", ondelete="CASCADE"),
                      nullable=False, index=True)
    price = Column(Float, nullable=False)
    delta = Column(Float, nullable=False)
    vega = Column(Float, nullable=False)
    calculation_type = Column(String(16), nullable=False)
    input = relationship("OptionInput", back_populates="outputs")

    __table_args__ = (
        UniqueConstraint("input_id", "calculation_type", name="uq_option_outputs_method"),
        CheckConstraint("calculation_type IN ('closed_form', 'tree')",
                        name="ck_option_outputs_method"),
    )
