# Routes package init
"""
Realty CRM API - API Routes Package
=====================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource; handlers declare their gates
       as dependencies and delegate to a service.

Route Inventory:
    - clients.py:       /api/v1/clients             (list, create)
                        /api/v1/clients/{id}        (get, update, delete)
    - transactions.py:  /api/v1/transactions        (list, create)
                        /api/v1/transactions/{id}   (get, update, delete)
    - health.py:        /api/v1/health, /api/v1/health/ready

Routes are THIN: gates + one service call + status code.
"""
