# bondvalues

Day-by-day values of retail treasury bonds.

The package reads a legacy Excel (`.xls`, BIFF8) workbook of retail bonds
with an `EDO` and a `ROD` sheet, works out the value of one bond unit for
every day from the start of sale, and serves the result over a small HTTP
API as JSON and CSV.

- **EDO** bonds run for 10 years, **ROD** bonds for 12 years.
- A bond starts at 100.00. Each bond year, interest at that year's rate from
  the sheet accrues linearly day by day and is added to the value at the end
  of the year; every day's value is rounded to two decimal places.

## Installing

```
pip install .
```

Python 3.10 or later is needed. The only runtime dependency is Flask.

## Running the server

```
bondvalues --help
bondvalues --bonds-location Dane_dotyczace_obligacji_detalicznych.xls
```

Options:

- `--bonds-location PATH` – the bonds workbook (required to start the server)
- `--host` – address to listen on (default `localhost`)
- `--port` – port to listen on (default `5150`)
- `--version` – print the version and exit; the version carries the commit
  from the `BUILD_SHA` or `GITHUB_SHA` environment variable, or `dev`

Without `--bonds-location`, or when the workbook cannot be read, the command
prints an error and exits with status 1. The server runs on Flask's built-in
development server.

Routes:

| Route                 | Answer                                                        |
|-----------------------|---------------------------------------------------------------|
| `GET /bonds`          | JSON array of all bond IDs, sorted                            |
| `GET /bonds/{id}/csv` | `text/csv` with a `date,value` header and one row per day     |
| `GET /bonds/{id}`     | always an empty response with status 500; the single-bond lookup is not implemented |

An unknown ID on the CSV route gives status 404 with a JSON body:

```json
{"error":"Bond with ID NONEXISTENT not found"}
```

## Using it as a library

```python
from bondvalues.model import BondId
from bondvalues.service import BondsService

service = BondsService.load("Dane_dotyczace_obligacji_detalicznych.xls")
print(service.get_bonds())           # sorted list of BondId
bond = service.get_bond(BondId("ROD0837"))
if bond is not None:
    print(bond.to_csv())
```

- `bondvalues.reader.read_bonds(path)` returns an `AllBonds` with an `edo`
  and a `rod` mapping from `BondId` to `Bond`. Any failure – a file that is
  not a readable workbook, a missing sheet, a row without sale dates – raises
  `BondsReadError`. `extract_bond_type(rows, bond_type, bond_length_in_years)`
  does the same for rows you already have.
- `bondvalues.xls.open_workbook(path)` opens a workbook; `Workbook.sheet_names`
  lists its sheets and `Workbook.worksheet(name)` returns the used range as
  rows of cells (`str`, `float`, `bool`, `datetime` or `None`). It raises
  `XlsError` for unreadable files or unknown sheets.
- `bondvalues.server.create_app(service)` builds the Flask application;
  `create_app_from_settings(settings)` builds it from a mapping with a
  `bonds_location` key and raises `SettingsError` when that is missing or not
  a string.

Computing a value series directly:

```python
from datetime import date
from bondvalues.value_generator import ValueGenerator

generator = ValueGenerator(100.0)
generator.add_yearly_return(0.0725)
generator.add_yearly_return(0.07)
values = generator.calculate_daily_bond_values(date(2023, 12, 1))
# values[0] is the starting value, then one value per day of each year
```

Smaller helpers:

- `bondvalues.models` – API models (`GetBond200Response`, `GetBond404Response`,
  path parameter classes) with `validate()`, `to_query()`/`from_query()` and
  `to_dict()`, plus XSS checks (`is_html`, `check_xss_string`,
  `check_xss_list`, `check_xss_map`) raising `ValidationError`.
- `bondvalues.headers` – parsing and formatting of header values (integers,
  strings, comma lists, booleans, RFC 3339 timestamps), raising `HeaderError`.
- `bondvalues.api_types` – `Nullable`, a value that may be explicitly null,
  and `ByteArray`, bytes carried as base64 in JSON.
- `bondvalues.views` – `HomeResponse` and `ObligacjeResponse` JSON bodies.

## Telemetry settings

`bondvalues.telemetry.load_otel_config(initializers)` reads an `otel`
section of the form:

```python
{
    "otel": {
        "common": {
            "transport": {
                "type": "HTTP",
                "url": "http://localhost:4318",
                "headers": {},
            }
        }
    }
}
```

It returns an `OtelConfig` whose `transport.endpoint("traces")` gives
`http://localhost:4318/v1/traces` (likewise for `metrics` and `logs`).
Without an `otel` section it logs a warning and returns `None`; a malformed
one raises `TelemetryConfigError`.

## What it does not do

The package only reads these settings: it sets up no tracing, metrics or log
export, and the server does not use them. There is no storage besides the
workbook, which is read once at start-up.

## Running the tests

```
pip install ".[test]"
pytest
```