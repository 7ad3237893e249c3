"""
MedCamp Backend — API Routes Package
======================================

Route Inventory:
    - users.py:          /users, /users/{email}, /users/role/{email}
    - camps.py:          /camps, /camps/{id}, /camps/{id}/reconcile
    - registrations.py:  /registrations, /registrations/{id}[/payment],
                         /registrations/camps/{campId}
    - payments.py:       /payments, /create-payment-intent
    - feedbacks.py:      /feedbacks
    - analytics.py:      /analytics/dashboard, /analytics/registered-camps-count
    - health.py:         /, /health

Routes stay thin: parse the request schema, call one service method, shape
the response. Errors propagate to the handlers registered in main.py.
"""
