"""Domain layer for tallyup application.

Services are imported from their modules, for example
``from tallyup.domain.tag import TagService``. This package does not
re-export them because ``tallyup.database.base`` imports
``tallyup.domain.entities`` and the services import ``tallyup.database.base``.
"""
