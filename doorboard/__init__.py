# Door board: order tracking client, kanban view model, and API service
#
# Components:
#   schema.py    - Data model (Order, Customer, OrderStatus, OrderPriority, ...)
#   client.py    - REST clients for orders, customers and auth
#   auth.py      - AuthSession, passed explicitly to clients and views
#   stages.py    - Board columns and the order partitioner
#   board.py     - Kanban board view model (optimistic moves, reload)
#   dashboard.py - Statistics cards, recent orders, list pages
#   services.py  - Wires clients together from a Config
#   config.py    - YAML + environment configuration
#   server.py    - Flask health / info service
