class ValidationError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedPrice(Exception):
    def __init__(self, value: object):
        self.value = value
        self.message = f"Malformed price: {value!r}"
        super().__init__(self.message)


class CatalogUnavailable(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RoomNotFound(Exception):
    def __init__(self, room_id: str):
        self.room_id = room_id
        self.message = f"Room {room_id} not found"
        super().__init__(self.message)


class IncompleteRoomData(Exception):
    def __init__(self, room_id: str | None):
        self.room_id = room_id
        self.message = "Room data is missing hotel information"
        super().__init__(self.message)


class MissingContactEmail(Exception):
    def __init__(self):
        self.message = "Email is required to complete booking"
        super().__init__(self.message)


class BookingRejected(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
