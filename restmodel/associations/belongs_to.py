from typing import Any, Mapping, Optional

from restmodel.associations.association import Association
from restmodel.associations.declaration import AssociationDescriptor
from restmodel.paths import PathResult
from restmodel.utils import blank


class BelongsToAssociation(Association):
    """
    `comment.user` - the path is the *target's* resource path, with the id
    taken from the parent's foreign key:

        comment = Comment.find(1)   # {"id": 1, "user_id": 7}
        comment.user                # GET /users/7
    """

    @classmethod
    def default_foreign_key(cls, name: str) -> Optional[str]:
        return f'{name}_id'

    def path(self, params: Mapping[str, Any]) -> PathResult:
        foreign_key = self.declaration.foreign_key
        value = self.parent.attributes.get(foreign_key)
        if blank(value):
            return PathResult.unavailable(foreign_key)

        primary_key = self.klass.resolved_config().primary_key
        return self.paths.build(
            lambda: self.klass.request_path_for({**params, primary_key: value}, member=True))


def belongs_to(class_name=None, **options) -> AssociationDescriptor:
    return AssociationDescriptor(BelongsToAssociation, class_name, **options)
