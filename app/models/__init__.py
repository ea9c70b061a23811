from app.models.noc import NocCertificate, NocStatus

__all__ = [
    "NocCertificate",
    "NocStatus"
]
