"""
flightdesk: airline back-office flight inventory and booking engine.

The package keeps each flight's free-seat counter consistent under concurrent
ticket sales and cancellations, enforces capacity against the assigned aircraft,
and answers the operational queries and reports that read the same inventory:
1. Seat inventory and ticket booking transactions
2. Flight queries (nearest flight, non-stop, most expensive, replacement candidates, load)
3. General and sales reports
"""

__version__ = "0.1.0"
