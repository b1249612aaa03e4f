"""Dedup table of priced inputs plus latest outputs per (input, method)."""

import logging
import threading
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import List, Optional, Union

import pandas as pd
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.types import CalcMethod, PricingRequest, PricingResult
from ..errors import StoreError
from .db import Base, make_engine, make_session_factory
from .models import OptionInput, OptionOutput

logger = logging.getLogger(__name__)


@dataclass
class RecentCalculation:
    input_id: int
    created_at: Optional[datetime]
    spot: float
    strike: float
    rate: float
    volatility: float
    maturity: float
    steps: int
    type: str
    price: float
    delta: float
    vega: float
    method: str


class OptionStore:
    """Persistence for priced requests.

    One instance is shared by every connection. All writes go through a
    single lock so an insert-or-fetch on option_inputs can never race with
    another one from this process; the unique constraint plus a fallback
    lookup covers writers in other processes.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session = make_session_factory(engine)
        self._write_lock = threading.Lock()

    def initialize(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot initialize database at {self.engine.url}: {e}") from e
        logger.info("Database initialized at %s", self.engine.url)

    def close(self) -> None:
        self.engine.dispose()

    # --- writes ---------------------------------------------------------------

    @staticmethod
    def _matching_input(req: PricingRequest):
        return select(OptionInput.input_id).where(
            OptionInput.spot == req.S,
            OptionInput.strike == req.K,
            OptionInput.rate == req.r,
            OptionInput.volatility == req.sigma,
            OptionInput.maturity == req.T,
            OptionInput.steps == req.steps,
            OptionInput.type == req.kind.value,
        )

    def store_input(self, req: PricingRequest) -> Optional[int]:
        """Return the id of the row holding this 7-tuple, creating it on first sight.

        Returns None if the database rejected the write.
        """
        try:
            with self._write_lock, self._session() as db:
                existing = db.execute(self._matching_input(req)).scalar_one_or_none()
                if existing is not None:
                    return existing

                row = OptionInput(
                    spot=req.S, strike=req.K, rate=req.r, volatility=req.sigma,
                    maturity=req.T, steps=req.steps, type=req.kind.value,
                )
                db.add(row)
                try:
                    db.commit()
                except IntegrityError:
                    # inserted by another process since the lookup
                    db.rollback()
                    return db.execute(self._matching_input(req)).scalar_one()
                return row.input_id
        except SQLAlchemyError as e:
            logger.warning("Failed to store input %s: %s", req, e)
            return None

    def store_output(
        self, input_id: int, result: PricingResult, method: Union[CalcMethod, str]
    ) -> bool:
        """Insert or overwrite the output row for (input_id, method)."""
        try:
            method = CalcMethod(method)
        except ValueError:
            logger.warning("Unknown calculation type %r for input %s", method, input_id)
            return False

        try:
            with self._write_lock, self._session() as db:
                row = db.execute(
                    select(OptionOutput).where(
                        OptionOutput.input_id == input_id,
                        OptionOutput.calculation_type == method.value,
                    )
                ).scalar_one_or_none()
                if row is None:
                    row = OptionOutput(input_id=input_id, calculation_type=method.value)
                    db.add(row)
                row.price = result.price
                row.delta = result.delta
                row.vega = result.vega
                db.commit()
            return True
        except SQLAlchemyError as e:
            logger.warning("Failed to store output for input %s (%s): %s",
                           input_id, method.value, e)
            return False

    def record(self, req: PricingRequest, result: PricingResult) -> bool:
        """Store the input and its result. Never raises."""
        input_id = self.store_input(req)
        if input_id is None:
            return False
        return self.store_output(input_id, result, req.method.label)

    def delete_input(self, input_id: int) -> bool:
        """Administrative delete; dependent outputs go with it."""
        try:
            with self._write_lock, self._session() as db:
                row = db.get(OptionInput, input_id)
                if row is None:
                    return False
                db.delete(row)
                db.commit()
            return True
        except SQLAlchemyError as e:
            logger.warning("Failed to delete input %s: %s", input_id, e)
            return False

    # --- reads ----------------------------------------------------------------

    def recent(self, limit: int = 10) -> List[RecentCalculation]:
        stmt = (
            select(OptionInput, OptionOutput)
            .join(OptionOutput, OptionOutput.input_id == OptionInput.input_id)
            .order_by(OptionInput.created_at.desc(), OptionInput.input_id.desc(),
                      OptionOutput.output_id.desc())
            .limit(limit)
        )
        try:
            with self._session() as db:
                rows = db.execute(stmt).all()
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot read recent calculations: {e}") from e
        return [
            RecentCalculation(
                input_id=i.input_id, created_at=i.created_at,
                spot=i.spot, strike=i.strike, rate=i.rate, volatility=i.volatility,
                maturity=i.maturity, steps=i.steps, type=i.type,
                price=o.price, delta=o.delta, vega=o.vega, method=o.calculation_type,
            )
            for i, o in rows
        ]

    def recent_frame(self, limit: int = 10) -> pd.DataFrame:
        columns = [f.name for f in fields(RecentCalculation)]
        return pd.DataFrame([asdict(r) for r in self.recent(limit)], columns=columns)


def create_store(url: str) -> OptionStore:
    """Build a store on a fresh engine and create the schema."""
    try:
        engine = make_engine(url)
    except (SQLAlchemyError, ValueError) as e:
        raise StoreError(f"Invalid database URL {url!r}: {e}") from e
    store = OptionStore(engine)
    store.initialize()
    return store
