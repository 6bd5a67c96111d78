from .association import Association, AssociationProxy
from .declaration import AssociationDeclaration, AssociationDescriptor
from .has_many import HasManyAssociation, has_many
from .has_one import HasOneAssociation, has_one
from .belongs_to import BelongsToAssociation, belongs_to
