from .models import ContentRecord, ContentType, ContentStatus, parse_records

__all__ = ['ContentRecord', 'ContentType', 'ContentStatus', 'parse_records']
