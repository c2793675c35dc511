class AuthUrls:
    AUTH_URL = "https://auth.selcdn.ru"


class AuthHeaders:
    USER = "X-Auth-User"
    KEY = "X-Auth-Key"
    TOKEN = "X-Auth-Token"
    STORAGE_URL = "X-Storage-Url"


CACHE_KEY = "selectelCloudStorage.apiClient"
STORAGE_URL_CACHE_KEY = f"{CACHE_KEY}.storageUrl"
