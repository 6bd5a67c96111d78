"""An object layer for JSON REST APIs.

Models map JSON response bodies to resources, and resources back to
request bodies. Associations between models (`has_many`, `has_one`,
`belongs_to`) fetch their data lazily, relative to the parent resource.

    import restmodel
    from restmodel import Model, has_many

    restmodel.setup('https://api.example.com')

    class User(Model):
        comments = has_many()

    user = User.find(1)
    for comment in user.comments.where(approved=1):
        ...
"""

from .api import API, setup, get_default_api
from .associations import has_many, has_one, belongs_to, AssociationProxy
from .collection import Collection
from .config import RootFormat
from .errors import RestModelError, PathError, UnknownModelError, ConfigurationError
from .model import Model
