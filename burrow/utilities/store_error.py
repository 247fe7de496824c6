from pymongo.errors import PyMongoError


StoreError = PyMongoError
""" Anything the driver raises (insert, query, update, remove and index failures). These are never caught or translated. """
