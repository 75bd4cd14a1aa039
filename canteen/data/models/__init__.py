#import modeli zeby SQLAlchemy zarejestrowal je w Base.metadata

from canteen.data.models.document import DocumentModel

__all__ = ["DocumentModel"]
