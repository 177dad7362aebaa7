"""MongoDB implementation of MemberRepository."""

from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import PyMongoError
from adapter.mongodb import MEMBERS_COLLECTION_NAME
from domain.model.member import EmailStatus, Member

logger = getLogger(__name__)


class MongoMemberRepository:
    def __init__(self, db: Database):
        self.collection = db[MEMBERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for members collection."""
        from adapter.mongodb.indexes import MEMBER_INDEXES, apply_indexes

        return apply_indexes(self.collection, MEMBER_INDEXES)

    def _to_domain(self, doc: dict) -> Member:
        """Convert MongoDB document to Member domain model."""
        return Member(
            id=doc['_id'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            name=doc.get('name'),
            username=doc.get('username'),
            email_status=EmailStatus(doc.get('email_status', EmailStatus.ACTIVE.value)),
            unsubscribed_at=doc.get('unsubscribed_at'),
        )

    def upsert(
        self,
        user_id: str,
        email: str,
        name: str | None = None,
        username: str | None = None,
    ) -> bool:
        """Insert a member or merge the given fields into the existing one."""
        if not user_id or not email:
            logger.warning("Missing user id or email, cannot store member", extra={"userId": user_id})
            return False

        now = datetime.now(timezone.utc)
        fields = {'email': email, 'updated_at': now}
        if name:
            fields['name'] = name
        if username:
            fields['username'] = username

        try:
            self.collection.update_one(
                {'_id': user_id},
                {
                    '$set': fields,
                    '$setOnInsert': {
                        'created_at': now,
                        'email_status': EmailStatus.ACTIVE.value,
                        'unsubscribed_at': None,
                    },
                },
                upsert=True,
            )
            logger.info("Member stored", extra={"userId": user_id, "email": email})
            return True
        except PyMongoError as e:
            logger.error("Failed to store member", extra={"userId": user_id, "error": str(e)})
            return False

    def get_by_id(self, user_id: str) -> Member | None:
        """Find a member by provider user id. Return Member or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
            if doc:
                return self._to_domain(doc)
            return None
        except PyMongoError as e:
            logger.error("Failed to get member by ID", extra={"userId": user_id, "error": str(e)})
            return None

    def get_by_email(self, email: str) -> Member | None:
        """Find a member by email. Return Member or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
            if doc:
                return self._to_domain(doc)
            return None
        except PyMongoError as e:
            logger.error("Failed to get member by email", extra={"email": email, "error": str(e)})
            return None

    def update_email_status(self, email: str, status: EmailStatus) -> bool:
        """Set email status for every member with this email. Return True if successful."""
        try:
            now = datetime.now(timezone.utc)
            fields = {'email_status': status.value, 'updated_at': now}
            if status == EmailStatus.UNSUBSCRIBED:
                fields['unsubscribed_at'] = now
            self.collection.update_many({'email': email}, {'$set': fields})
            logger.info("Email status updated", extra={"email": email, "status": status.value})
            return True
        except PyMongoError as e:
            logger.error("Failed to update email status", extra={"email": email, "error": str(e)})
            return False

    def count_by_status(self, status: EmailStatus) -> int | None:
        """Count members with the given email status. Return None on failure."""
        try:
            return self.collection.count_documents({'email_status': status.value})
        except PyMongoError as e:
            logger.error("Failed to count members", extra={"status": status.value, "error": str(e)})
            return None
