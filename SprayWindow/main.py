"""Spray window advisor - polls the hourly forecast and prints a spray recommendation."""
import argparse
import json
import logging
import os
import signal
import sys
import time
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from forecast_service import ForecastService
from openweather_provider import OpenWeatherProvider
from meteosource_provider import MeteoSourceProvider
from weather_provider import ForecastProviderBase, FallbackForecastProvider, WeatherProviderError
from spray_data import SprayRecommendation
from spray_layout import format_summary
from badge_canvas import PILCanvas, render_recommendation
from reminder import Reminder, ReminderScheduler

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "spray-window.log")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Spray window advisor")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--provider", choices=["openweather", "meteosource", "auto"], default="auto")
    parser.add_argument("--hours", type=int, default=12, help="Forecast horizon in hours")
    parser.add_argument("--refresh", type=float, default=600.0, help="Seconds between refreshes")
    parser.add_argument("--once", action="store_true", help="Compute one recommendation and exit")
    parser.add_argument("--json", action="store_true", help="Print recommendations as JSON")
    parser.add_argument("--badge", default=None, help="Write a PNG badge to this path")
    parser.add_argument("--cache-ttl", type=int, default=600)
    parser.add_argument("--max-retries", type=int, default=3)
    parser.add_argument("--retry-delay", type=int, default=2)
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--remind-lead", type=int, default=0, help="Minutes before the window to remind")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def load_config(provider: str) -> Tuple[Optional[str], Optional[str], float, float, str]:
    load_dotenv()
    openweather_key = os.getenv("WEATHER_API_KEY")
    meteosource_key = os.getenv("METEOSOURCE_API_KEY")
    lat = os.getenv("WEATHER_LAT")
    lon = os.getenv("WEATHER_LON")
    lang = os.getenv("WEATHER_LANG", "en")

    if provider == "openweather" and not openweather_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")
    if provider == "meteosource" and not meteosource_key:
        raise SystemExit("Missing METEOSOURCE_API_KEY in environment")
    if provider == "auto" and not (openweather_key or meteosource_key):
        raise SystemExit("Missing WEATHER_API_KEY or METEOSOURCE_API_KEY in environment")
    if not lat or not lon:
        raise SystemExit("Missing WEATHER_LAT/WEATHER_LON in environment")

    try:
        lat_val = float(lat)
        lon_val = float(lon)
    except ValueError as exc:
        raise SystemExit(f"Invalid coordinates: {exc}") from exc

    logging.info("Configuration loaded: lat=%s lon=%s provider=%s", lat_val, lon_val, provider)
    return openweather_key, meteosource_key, lat_val, lon_val, lang


def build_provider(
    provider: str,
    openweather_key: Optional[str],
    meteosource_key: Optional[str],
    lat: float,
    lon: float,
    lang: str,
    timeout: int
) -> ForecastProviderBase:
    providers: List[ForecastProviderBase] = []
    if provider in ("meteosource", "auto") and meteosource_key:
        providers.append(MeteoSourceProvider(api_key=meteosource_key, lat=lat, lon=lon, lang=lang, timeout=timeout))
    if provider in ("openweather", "auto") and openweather_key:
        providers.append(OpenWeatherProvider(api_key=openweather_key, lat=lat, lon=lon, lang=lang, timeout=timeout))

    if len(providers) == 1:
        return providers[0]
    return FallbackForecastProvider(providers)


def build_forecast_service(provider: ForecastProviderBase, args: argparse.Namespace) -> ForecastService:
    service = ForecastService(
        provider=provider,
        horizon_hours=args.hours,
        cache_ttl_seconds=args.cache_ttl,
        max_retries=args.max_retries,
        retry_delay_seconds=args.retry_delay,
    )
    logging.info("Forecast service ready (horizon=%sh, cache ttl=%ss)", args.hours, args.cache_ttl)
    return service


def log_reminder(reminder: Reminder) -> None:
    logging.info("Reminder: %s at %s", reminder.message, reminder.at.isoformat())


def show_recommendation(rec: SprayRecommendation, args: argparse.Namespace) -> None:
    if args.json:
        print(json.dumps(rec.to_dict()))
    else:
        print(format_summary(rec))

    if args.badge:
        canvas = PILCanvas()
        render_recommendation(canvas, rec)
        canvas.save(args.badge)
        logging.info("Badge written to %s", args.badge)


def run_frame(service: ForecastService, scheduler: ReminderScheduler, args: argparse.Namespace) -> SprayRecommendation:
    rec = service.get_recommendation()
    logging.info(
        "Spray: state=%s reason=%s maxRain=%s maxWind=%s window=%s..%s",
        rec.state,
        rec.reason,
        rec.max_rain,
        rec.max_wind,
        rec.next_good_start,
        rec.next_good_end,
    )
    show_recommendation(rec, args)
    scheduler.schedule(rec)
    return rec


def advisor_loop(service: ForecastService, scheduler: ReminderScheduler, args: argparse.Namespace) -> None:
    frame = 0
    while True:
        frame += 1
        logging.info("Frame %s: fetching forecast", frame)
        try:
            run_frame(service, scheduler, args)
        except WeatherProviderError as err:
            logging.error("Forecast fetch failed: %s", err)

        if args.once:
            return
        time.sleep(max(args.refresh, 1.0))


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    openweather_key, meteosource_key, lat, lon, lang = load_config(args.provider)

    provider = build_provider(args.provider, openweather_key, meteosource_key, lat, lon, lang, args.timeout)
    service = build_forecast_service(provider, args)
    scheduler = ReminderScheduler(log_reminder, lead_minutes=args.remind_lead)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        advisor_loop(service, scheduler, args)
    except KeyboardInterrupt:
        logging.info("Stopping advisor")


if __name__ == "__main__":
    main()
