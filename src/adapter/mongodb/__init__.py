MEMBERS_COLLECTION_NAME = 'members'
