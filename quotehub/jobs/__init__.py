from .offering_refresh import JsonlOfferingSource, OfferingRefreshJob, OfferingSource, RefreshResult

__all__ = ["JsonlOfferingSource", "OfferingRefreshJob", "OfferingSource", "RefreshResult"]
