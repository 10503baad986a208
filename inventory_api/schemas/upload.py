from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    message: str = "File uploaded successfully"
    filename: str
    originalName: str
    size: int
    url: str
    fullUrl: str
