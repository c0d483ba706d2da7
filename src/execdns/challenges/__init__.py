"""DNS-01 challenge helpers."""

from execdns.challenges.dns01 import compute_dns_txt_value, dns01_record

__all__ = ["compute_dns_txt_value", "dns01_record"]
