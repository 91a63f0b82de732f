# Services package init
"""
OrderDesk Backend - Services Layer
==================================

What:  Domain logic between the routes (HTTP) and the database/providers.

Service Inventory:
    - Authorizer (abstract) / RowLevelAuthorizer: ownership checks
    - OrderExporter: customer orders → CsvDocument (csv_export does the text)
    - NotificationSender: order confirmation email
    - EmailProvider (abstract) / ResendEmailProvider: outbound email
    - IdentityGateway: email/password login at the identity provider
"""
