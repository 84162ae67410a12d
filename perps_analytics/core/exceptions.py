class AppError(Exception):
    """所有應用程式自定義錯誤的基類"""
    pass

class DataSourceError(AppError):
    """資料來源錯誤 (如快照檔案無法讀取或不是合法 JSON)"""
    pass

class InvalidParameterError(AppError, ValueError):
    """呼叫端參數錯誤 (如不在允許集合內的時間區間)"""
    pass
