from __future__ import annotations

from enum import Enum

from quote_proxy.domain.entities.swap import NormalizedSwapRequest, SwapRequest


NATIVE_ASSET_SENTINEL = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
WRAPPED_NATIVE_BASE = "0x4200000000000000000000000000000000000006"


class NativeAssetMode(str, Enum):
    PASSTHROUGH = "passthrough"
    WRAP = "wrap"


def is_native_sentinel(token: str) -> bool:
    return token.strip().lower() == NATIVE_ASSET_SENTINEL.lower()


class TokenNormalizer:
    """Resolves the native-asset sentinel the way the deployment's aggregator mode expects.

    In PASSTHROUGH mode the sentinel is sent as-is (the allowance-holder endpoint
    quotes native coin directly). In WRAP mode it becomes the wrapped-native
    contract. Any other identifier is returned unchanged; the aggregator rejects
    unknown tokens.
    """

    def __init__(
        self,
        *,
        mode: NativeAssetMode = NativeAssetMode.PASSTHROUGH,
        wrapped_native_address: str = WRAPPED_NATIVE_BASE,
    ):
        self.mode = NativeAssetMode(mode)
        self._wrapped_native_address = wrapped_native_address

    def normalize_token(self, token: str) -> str:
        if self.mode is NativeAssetMode.WRAP and is_native_sentinel(token):
            return self._wrapped_native_address
        return token

    def normalize(self, request: SwapRequest | NormalizedSwapRequest) -> NormalizedSwapRequest:
        return NormalizedSwapRequest(
            sell_token=self.normalize_token(request.sell_token),
            buy_token=self.normalize_token(request.buy_token),
            sell_amount=request.sell_amount,
            taker=request.taker,
        )
