import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse
import uvicorn

from client import BlockClient
from config import RPC_URL, LOG_LEVEL, SERVER_HOST, SERVER_PORT
from errors import BlockNotConfirmedError, TransportError, UnsupportedEncodingError
from tx_types import GetBlockOpts

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    client = getattr(app.state, "block_client", None)
    if client is not None:
        await client.close()
        app.state.block_client = None


app = FastAPI(
    title="Block API",
    description="API for retrieving confirmed Solana blocks by slot",
    version="1.0.0",
    lifespan=lifespan,
)


def get_block_client() -> BlockClient:
    client = getattr(app.state, "block_client", None)
    if client is None:
        client = BlockClient.from_url(RPC_URL)
        app.state.block_client = client
    return client


@app.get("/")
async def root():
    return RedirectResponse(url="/docs")

@app.get("/blocks/{slot}",
         summary="Get block",
         description="Retrieves identity and transaction information about a confirmed block. Options left out use the node defaults.")
async def get_block(
    slot: int,
    encoding: Optional[str] = None,
    transaction_details: Optional[str] = None,
    rewards: Optional[bool] = None,
    commitment: Optional[str] = None,
    max_supported_transaction_version: Optional[int] = Query(default=None, ge=0),
):
    opts = GetBlockOpts(
        encoding=encoding,
        transaction_details=transaction_details,
        rewards=rewards,
        commitment=commitment,
        max_supported_transaction_version=max_supported_transaction_version,
    )
    try:
        block = await get_block_client().get_block_with_opts(slot, opts)
    except UnsupportedEncodingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BlockNotConfirmedError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransportError as e:
        logger.error(f"getBlock {slot} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return block.to_json()

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    uvicorn.run("server:app", host=SERVER_HOST, port=SERVER_PORT, reload=True)
