"""Azure Functions entry point — triggers, orchestrator and activity function definitions."""

import logging

import azure.durable_functions as df
import azure.functions as func

from letsencrypt_renewal.config import WebAppTarget, load_engine_factory_path, load_renewal_parameters, load_web_apps
from letsencrypt_renewal.engine import load_engine_factory
from letsencrypt_renewal.models import RenewalResult
from letsencrypt_renewal.renewal import RenewalManager

app = df.DFApp(http_auth_level=func.AuthLevel.FUNCTION)


# Timer trigger — starts the Durable orchestrator daily
@app.function_name("timer_start")
@app.timer_trigger(schedule="0 0 2 * * *", arg_name="timer", run_on_startup=False)
@app.durable_client_input(client_name="client")
async def timer_start(timer: func.TimerRequest, client: df.DurableOrchestrationClient) -> None:
    instance_id = await client.start_new("renewal_orchestrator")
    logging.info("Started orchestrator instance %s", instance_id)


# Orchestrator — renew every configured web app in parallel
@app.orchestration_trigger(context_name="context")
def renewal_orchestrator(context: df.DurableOrchestrationContext):
    web_apps = yield context.call_activity("list_web_apps", None)
    tasks = [context.call_activity("renew_web_app", web_app) for web_app in web_apps]
    results = yield context.task_all(tasks)
    return raise_on_failures(results)


def raise_on_failures(results: list[dict]) -> list[dict]:
    """Return activity results unchanged, or raise once every web app has been attempted."""
    failed = [r for r in map(RenewalResult.from_dict, results) if not r.success]
    if failed:
        summary = "; ".join(f"{r.web_app}: {r.error}" for r in failed)
        raise RuntimeError(f"Certificate renewal failed for {len(failed)} of {len(results)} web app(s): {summary}")
    return results


# Activity — list the web apps configured for renewal
@app.activity_trigger(input_name="input")
def list_web_apps(input: None) -> list[str]:
    return [str(target) for target in load_web_apps()]


# Activity — add or renew the certificate of one web app
@app.activity_trigger(input_name="input")
async def renew_web_app(input: str) -> dict:
    target = WebAppTarget.parse(input)
    try:
        params = load_renewal_parameters(target)
        manager = RenewalManager(engine_factory=load_engine_factory(load_engine_factory_path()))
        await manager.renew(params)
    except Exception as exc:
        logging.exception("Certificate renewal failed for '%s'", target)
        return RenewalResult(web_app=str(target), success=False, error=str(exc)).to_dict()
    return RenewalResult(web_app=str(target), success=True).to_dict()
