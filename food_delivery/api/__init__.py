"""
GraphQL API

Strawberry schema mounted by ``food_delivery.main`` at ``/graphql``.
"""
