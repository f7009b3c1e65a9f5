"""
SQLAlchemy database models for the flight inventory and booking engine.

This module defines the three persisted tables:
- Plane: Aircraft with a fixed seat capacity (read-only for the booking engine)
- Flight: Scheduled flight with its stop list, price and running free-seat counter
- Ticket: One sold seat unit, referencing its flight by flight number
"""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Time,
)
from sqlalchemy.orm import declarative_base, relationship

# Create the declarative base for all models
Base = declarative_base()


class Plane(Base):
    """
    Plane model representing an aircraft of the fleet.

    The seat capacity bounds the free-seat counter of every flight flown by
    the plane. A plane cannot be deleted while a flight references it.
    """
    __tablename__ = 'plane'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False)  # Regional, Medium, Long-haul
    seats_count = Column(Integer, nullable=False)

    flights = relationship("Flight", back_populates="plane", lazy="select", passive_deletes="all")

    __table_args__ = (
        CheckConstraint('seats_count > 0', name='ck_plane_seats_count_positive'),
        CheckConstraint(
            "category IN ('Regional', 'Medium', 'Long-haul')",
            name='ck_plane_category',
        ),
    )

    def __repr__(self):
        return f"<Plane(id={self.id}, name='{self.name}', seats={self.seats_count})>"


class Flight(Base):
    """
    Flight model holding the seat inventory.

    ``free_seats`` is the single authoritative counter of unsold seats. It is
    only mutated by the seat inventory manager under a row lock.
    """
    __tablename__ = 'flight'

    id = Column(Integer, primary_key=True, autoincrement=True)
    flight_number = Column(String(10), nullable=False, unique=True, index=True)
    plane_id = Column(Integer, ForeignKey('plane.id', ondelete='RESTRICT'), nullable=False, index=True)
    stops = Column(JSON, nullable=False)  # ["Origin", ..., "Destination"]
    departure_time = Column(Time, nullable=False, index=True)
    free_seats = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    plane = relationship("Plane", back_populates="flights", lazy="joined", innerjoin=True)
    tickets = relationship("Ticket", back_populates="flight", lazy="select", passive_deletes="all")

    __table_args__ = (
        CheckConstraint('free_seats >= 0', name='ck_flight_free_seats_non_negative'),
        CheckConstraint('price > 0', name='ck_flight_price_positive'),
    )

    @property
    def seats_count(self) -> int:
        return self.plane.seats_count

    @property
    def plane_name(self) -> str:
        return self.plane.name

    @property
    def plane_category(self) -> str:
        return self.plane.category

    def __repr__(self):
        return (
            f"<Flight(id={self.id}, flight_number='{self.flight_number}', "
            f"free_seats={self.free_seats})>"
        )


class Ticket(Base):
    """
    Ticket model representing one sold seat unit.

    Tickets store no price: price, route and plane always come from the
    flight's current values at read time.
    """
    __tablename__ = 'ticket'

    id = Column(Integer, primary_key=True, autoincrement=True)
    counter_number = Column(Integer, nullable=False, index=True)
    flight_number = Column(
        String(10),
        ForeignKey('flight.flight_number', ondelete='RESTRICT', onupdate='CASCADE'),
        nullable=False,
        index=True,
    )
    flight_date = Column(Date, nullable=False, index=True)
    sale_time = Column(DateTime, nullable=False, index=True)

    flight = relationship("Flight", back_populates="tickets", lazy="joined", innerjoin=True)

    __table_args__ = (
        CheckConstraint('counter_number >= 1', name='ck_ticket_counter_positive'),
    )

    def __repr__(self):
        return (
            f"<Ticket(id={self.id}, flight_number='{self.flight_number}', "
            f"flight_date={self.flight_date}, counter={self.counter_number})>"
        )


# Composite indexes for the date-ranged load and sales queries
Index('idx_ticket_flight_date', Ticket.flight_number, Ticket.flight_date)
Index('idx_ticket_sale_counter', Ticket.sale_time, Ticket.counter_number)


def create_all_tables(engine):
    """
    Create all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine):
    """
    Drop all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.drop_all(bind=engine)


__all__ = [
    'Base',
    'Plane',
    'Flight',
    'Ticket',
    'create_all_tables',
    'drop_all_tables',
]
