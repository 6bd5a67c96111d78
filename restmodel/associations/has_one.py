from restmodel.associations.association import Association
from restmodel.associations.declaration import AssociationDescriptor


class HasOneAssociation(Association):
    """`user.role` - fetched with `GET /users/:id/role`."""


def has_one(class_name=None, **options) -> AssociationDescriptor:
    return AssociationDescriptor(HasOneAssociation, class_name, **options)
