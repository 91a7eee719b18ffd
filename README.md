# spellserve

A small HTTP service that keeps named spellchecking dictionaries on disk
and checks text against them. Each dictionary has its own alphabet and
maximum edit distance. Dictionaries can be given aliases, so clients can
ask for `en` while the service points it at whichever version is current.

## Installing

```
pip install .
```

## Running

The `spellserve` command takes no options. It is configured through
environment variables:

| Variable | Meaning | Default |
| --- | --- | --- |
| `SPELLCHECKER_DIR` | Directory holding dictionary files and metadata (required; created if missing) | none |
| `SPELLCHECKER_HTTP_ADDR` | Address to listen on, `host:port` | `localhost:8011` |
| `SPELLCHECKER_AUTOSAVE_INTERVAL` | How often to save everything, as a duration such as `30s`, `5m`, `1h30m` or `300ms` (units `ns`, `us`, `ms`, `s`, `m`, `h`); unset or zero means never | unset |
| `SPELLCHECKER_WORD_SPLIT_REGEXP` | Pattern that picks words out of text | `['\pL]+` |
| `SPELLCHECKER_LOG_LEVEL` | `debug`, `info`, `warn` or `error`; anything else means `info` | `info` |

Start it with:

```
SPELLCHECKER_DIR=./dicts spellserve
```

Logs are written to standard output as JSON lines tagged with the
application version. On SIGINT or SIGTERM the server stops and the
metadata and every dictionary are saved before exit. An invalid
configuration is logged and the command exits with status 1.

## Storage

Each dictionary is stored as `<code>.dict` in `SPELLCHECKER_DIR`, and
aliases are kept in a file named `metadata` in the same directory. Files
are written to a temporary file first and then renamed into place. On
start every readable `.dict` file is loaded; files that cannot be read are
logged and skipped.

Alias changes are written to disk at once. Words added to a dictionary are
only written when it is saved: through the save route, the autosave
interval, or at shutdown.

## API

All routes live under `/v1`. Request and response bodies are JSON.
Routes that return nothing answer `204 No Content`.

### Dictionaries

- `GET /v1/dictionaries/` lists dictionaries, sorted by code, with their
  aliases: `{"items": [{"code": "en", "aliases": ["eng"]}]}`.
- `POST /v1/dictionaries/{code}` creates a dictionary. Body:
  `{"alphabet": "abcdefghijklmnopqrstuvwxyz", "maxErrors": 2}`.
  The alphabet must not be empty and `maxErrors` must be between 0 and 5.
  Returns 409 if the dictionary already exists.
- `DELETE /v1/dictionaries/{code}` removes a dictionary and its file.
- `POST /v1/dictionaries/{code}/save` writes a dictionary to disk now.
- `POST /v1/dictionaries/{code}/add` adds words. Body:
  `{"phrases": [{"text": "hello world", "weight": 2}]}`. Each phrase is
  split into words; a weight of 0 or a missing weight counts as 1. The
  response gives the number of words added: `{"words": 2}`.
- `POST /v1/dictionaries/{code}/fix` checks text. Body:
  `{"text": "helo world", "limit": 5}`; `limit` defaults to 5 and a value
  below 1 means no cap. The response lists correct words and fixes, with
  positions counted in characters. Suggestions come best first; a
  suggestion's score is the word's weight divided by its edit distance
  plus one. With `hello` and `world` each added once:

```json
{
  "fixes": [
    {"start": 0, "end": 4, "error": "invalid_word",
     "suggestions": [{"text": "hello", "score": 0.5}]}
  ],
  "correct": [{"start": 5, "end": 10}]
}
```

  `unknown_word` means no suggestion was found, and such a fix carries no
  `suggestions` field. The add and fix routes accept a dictionary's code
  or any of its aliases.

### Aliases

- `GET /v1/aliases/` lists dictionaries with their aliases, as above.
- `GET /v1/aliases/{alias}` returns `{"dictionary": "<code>"}`.
- `PUT /v1/aliases/{alias}` with `{"dictionary": "<code>"}` points the
  alias at a dictionary, moving it away from any other one.
- `DELETE /v1/aliases/{alias}` removes the alias.

### Errors

Failures answer with `{"status": "<NAME>", "error": "<message>"}`:
400 for a malformed body or invalid field, 404 for unknown dictionaries
and aliases, 409 for a dictionary that already exists, and 500 otherwise.

### API description

`GET /docs` and `GET /docs/openapi.json` return a short OpenAPI 3.1
document listing each `/v1` path and method with a one-line summary. It
has no request or response schemas, and no interactive documentation
page is served.

## Using it from Python

```python
import regex

from spellserve.app import create_app
from spellserve.registry import Options, Registry

registry = Registry("./dicts")
registry.add("en", Options(alphabet="abcdefghijklmnopqrstuvwxyz", max_errors=2))
app = create_app(registry, regex.compile(r"['\pL]+"))
```

`create_app` returns a Flask application. The operations behind the
routes are also available directly in `spellserve.dictionaries` and
`spellserve.aliases`; they raise `StatusError`, whose `status` tells what
went wrong. The spellchecker itself is `spellserve.engine.Spellchecker`.

## Tests

```
pip install .[test]
pytest
```